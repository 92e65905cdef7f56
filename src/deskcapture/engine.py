"""Capture engine facade.

The engine is the single entry point callers use. It validates requests,
resolves ids through a fresh enumeration, dispatches to the active backend
and turns backend failures into typed errors.
"""

from collections.abc import Callable
from typing import TypeVar

from .base_exceptions import DeskCaptureException
from .capture_exceptions import CaptureFailedError, DisplayNotFoundError, WindowNotFoundError
from .config import CaptureSettings, get_settings
from .coordinates import (
    ValidatedRegion,
    VirtualDesktopBounds,
    clip_to_boundaries,
    validate_coordinates,
)
from .directory import FALLBACK_DISPLAY_ID, DisplayWindowDirectory
from .dispatcher import BackendKind, PlatformDispatcher
from .imaging import image_size
from .interfaces.capture_backend import ICaptureBackend
from .logging import get_logger
from .models import DisplayInfo, WindowInfo
from .process import CommandRunner

logger = get_logger(__name__)

T = TypeVar("T")


class CaptureEngine:
    """Platform-independent screen, window and region capture.

    The backend is detected and built on first use and then kept for the
    life of the engine. Beyond that the engine holds no state: displays and
    windows are enumerated fresh for every call, so one engine can serve
    concurrent callers without locking.

    Example:
        >>> engine = CaptureEngine()
        >>> png = engine.capture_region(0, 0, 800, 600)
        >>> window = engine.get_window_by_title("terminal")
        >>> if window:
        ...     png = engine.capture_window(window.id, include_frame=True)
    """

    def __init__(
        self,
        settings: CaptureSettings | None = None,
        runner: CommandRunner | None = None,
        dispatcher: PlatformDispatcher | None = None,
        backend: ICaptureBackend | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Capture settings, the process-wide settings if not given
            runner: Command runner handed to tool-based backends
            dispatcher: Platform dispatcher, built from ``settings`` if not given
            backend: Pre-built backend, skipping detection entirely
        """
        self.settings = settings or get_settings()
        self.runner = runner
        self.dispatcher = dispatcher or PlatformDispatcher(self.settings)
        self._backend = backend

    @property
    def backend(self) -> ICaptureBackend:
        """Get the active backend, detecting and building it on first access."""
        if self._backend is None:
            self._backend = self.dispatcher.create_backend(self.runner)
        return self._backend

    @property
    def backend_kind(self) -> BackendKind:
        """Get the kind of the active backend."""
        if self._backend is not None and self._backend.name:
            return BackendKind(self._backend.name)
        return self.dispatcher.detect()

    @property
    def directory(self) -> DisplayWindowDirectory:
        """Get a directory bound to the active backend."""
        return DisplayWindowDirectory(self.backend, self.settings)

    @property
    def fallback_size(self) -> tuple[int, int]:
        """Size of the bounds assumed when no display can be enumerated."""
        return (self.settings.fallback_width, self.settings.fallback_height)

    # Enumeration

    def get_displays(self) -> list[DisplayInfo]:
        """Enumerate displays, never empty, exactly one primary."""
        return self.directory.get_displays()

    def get_windows(self) -> list[WindowInfo]:
        """Enumerate windows, empty when enumeration fails."""
        return self.directory.get_windows()

    def get_window_by_id(self, window_id: str) -> WindowInfo | None:
        """Find a window by id in a fresh snapshot."""
        return self.directory.get_window_by_id(window_id)

    def get_window_by_title(self, pattern: str) -> WindowInfo | None:
        """Find the first window whose title matches a case-insensitive regex."""
        return self.directory.get_window_by_title(pattern)

    def get_virtual_desktop(self) -> VirtualDesktopBounds:
        """Compute the current virtual desktop bounds."""
        return VirtualDesktopBounds.from_displays(self.get_displays(), self.fallback_size)

    # Capture

    def capture_screen(self, display_id: str | None = None) -> bytes:
        """Capture the full screen or one display.

        Args:
            display_id: Display to capture, None for the full screen

        Returns:
            PNG encoded image bytes

        Raises:
            DisplayNotFoundError: If ``display_id`` is not currently enumerated
            CaptureFailedError: If the backend fails
        """
        display = None
        if display_id is not None:
            displays = self.get_displays()
            display = next((d for d in displays if d.id == display_id), None)
            if display is None:
                raise DisplayNotFoundError(display_id, [d.id for d in displays])
            if display.id == FALLBACK_DISPLAY_ID:
                # Synthetic display: the platform could not be queried, grab everything
                display = None

        data = self._run_backend(
            "capture_screen",
            lambda: self.backend.capture_screen(display),
            display_id=display_id,
        )
        self._log_captured("capture_screen", data, display_id=display_id)
        return data

    def capture_window(self, window_id: str, include_frame: bool = False) -> bytes:
        """Capture one window.

        Args:
            window_id: Window id from a recent enumeration
            include_frame: Include window manager decorations

        Returns:
            PNG encoded image bytes

        Raises:
            WindowNotFoundError: If the window does not exist or is minimized
            CaptureFailedError: If the backend fails
        """
        window = self.get_window_by_id(window_id)
        if window is None:
            raise WindowNotFoundError(f"Window not found: {window_id}", window_id=window_id)

        if window.is_minimized:
            raise WindowNotFoundError(
                f"Window is minimized and cannot be captured: {window_id}",
                window_id=window_id,
                title=window.title,
                minimized=True,
            )

        data = self._run_backend(
            "capture_window",
            lambda: self.backend.capture_window(window, include_frame),
            window_id=window_id,
            include_frame=include_frame,
        )
        self._log_captured(
            "capture_window", data, window_id=window_id, include_frame=include_frame
        )
        return data

    def capture_region(self, x: int, y: int, width: int, height: int) -> bytes:
        """Capture a rectangle of the virtual desktop.

        The request is validated before any enumeration, then clipped to
        the virtual desktop; the backend only ever sees the clipped
        rectangle.

        Args:
            x: Left edge
            y: Top edge
            width: Width in pixels
            height: Height in pixels

        Returns:
            PNG encoded image bytes

        Raises:
            InvalidRegionError: If the request is malformed or fully off-screen
            CaptureFailedError: If the backend fails
        """
        data, _ = self.capture_region_validated(x, y, width, height)
        return data

    def capture_region_validated(
        self, x: int, y: int, width: int, height: int
    ) -> tuple[bytes, ValidatedRegion]:
        """Capture a rectangle and report how it was clipped.

        Returns:
            Tuple of (PNG bytes, clip result)
        """
        validate_coordinates(x, y, width, height)

        region = clip_to_boundaries(x, y, width, height, self.get_displays(), self.fallback_size)
        if region.was_clipped:
            logger.info(
                "capture_region_clipped",
                original=region.original_region.to_dict(),
                clipped=region.clipped_region.to_dict(),
            )

        data = self._run_backend(
            "capture_region",
            lambda: self.backend.capture_region_internal(region.clipped_region),
            region=region.clipped_region.to_dict(),
        )
        self._log_captured("capture_region", data, was_clipped=region.was_clipped)
        return data, region

    def _run_backend(self, operation: str, call: Callable[[], T], **context: object) -> T:
        """Run one backend call, wrapping foreign failures as capture failures."""
        try:
            return call()
        except (WindowNotFoundError, CaptureFailedError):
            raise
        except Exception as e:
            logger.error(
                "capture_failed",
                operation=operation,
                backend=self.backend.name,
                error=str(e),
                error_type=type(e).__name__,
                **context,
            )
            raise CaptureFailedError(
                str(e.message if isinstance(e, DeskCaptureException) else e),
                operation=operation,
                backend=self.backend.name,
                error_type=type(e).__name__,
                **context,
            ) from e

    def _log_captured(self, operation: str, data: bytes, **context: object) -> None:
        size = image_size(data)
        logger.debug(
            "capture_completed",
            operation=operation,
            backend=self.backend.name,
            bytes=len(data),
            width=size[0] if size else None,
            height=size[1] if size else None,
            **context,
        )


def create_capture_engine(
    settings: CaptureSettings | None = None, runner: CommandRunner | None = None
) -> CaptureEngine:
    """Create an engine for the running platform.

    Detection happens immediately so an unsupported platform fails here
    rather than on the first capture.

    Args:
        settings: Capture settings, the process-wide settings if not given
        runner: Command runner for tool-based backends

    Returns:
        Ready-to-use capture engine

    Raises:
        UnsupportedPlatformError: If no backend exists for the platform
    """
    engine = CaptureEngine(settings=settings, runner=runner)
    _ = engine.backend
    return engine
