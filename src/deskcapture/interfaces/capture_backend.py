"""Capture backend interface definition."""

from abc import ABC, abstractmethod

from ..models import DisplayInfo, RegionInfo, WindowInfo


class ICaptureBackend(ABC):
    """Interface every platform capture backend implements.

    Backends translate already-validated requests into one concrete tool
    invocation or API call. They may raise freely; the engine and the
    directory decide how failures surface to callers.
    """

    name: str = ""

    @abstractmethod
    def capture_screen(self, display: DisplayInfo | None = None) -> bytes:
        """Capture the whole screen or one display.

        Args:
            display: Display to capture, None for the full screen

        Returns:
            PNG encoded image bytes
        """
        pass

    @abstractmethod
    def capture_window(self, window: WindowInfo, include_frame: bool) -> bytes:
        """Capture a single visible window.

        Args:
            window: Resolved, non-minimized window
            include_frame: Include window manager decorations when True,
                capture only the client area when False

        Returns:
            PNG encoded image bytes
        """
        pass

    @abstractmethod
    def capture_region_internal(self, region: RegionInfo) -> bytes:
        """Capture a rectangle that is already clipped to the virtual desktop.

        Args:
            region: In-bounds rectangle with positive extent

        Returns:
            PNG encoded image bytes
        """
        pass

    @abstractmethod
    def get_displays(self) -> list[DisplayInfo]:
        """Enumerate displays.

        Returns:
            Displays as reported by the platform, possibly empty

        Raises:
            Exception: Any enumeration failure, handled by the directory
        """
        pass

    @abstractmethod
    def get_windows(self) -> list[WindowInfo]:
        """Enumerate top-level windows.

        Returns:
            Windows as reported by the platform, possibly empty
        """
        pass
