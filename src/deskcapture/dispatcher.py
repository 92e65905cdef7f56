"""Platform detection and backend construction."""

import os
import sys
from collections.abc import Mapping
from enum import Enum
from pathlib import Path

from .capture_exceptions import UnsupportedPlatformError
from .config import CaptureSettings
from .interfaces.capture_backend import ICaptureBackend
from .logging import get_logger
from .process import CommandRunner, SubprocessRunner

logger = get_logger(__name__)


class BackendKind(Enum):
    """Available capture backends."""

    X11 = "x11"
    WAYLAND = "wayland"
    MACOS = "macos"
    WINDOWS = "windows"
    WSL = "wsl"


class PlatformDispatcher:
    """Detect the active capture backend and build it.

    Detection runs once, on first use, and the result is kept for the life
    of the dispatcher: the display server cannot change under a running
    process. Inputs are injectable so detection can be exercised for any
    platform.
    """

    def __init__(
        self,
        settings: CaptureSettings,
        platform: str | None = None,
        environ: Mapping[str, str] | None = None,
        proc_version_path: Path | str = "/proc/version",
    ) -> None:
        """Initialize the dispatcher.

        Args:
            settings: Capture settings, ``backend`` overrides detection
            platform: Platform identifier, defaults to ``sys.platform``
            environ: Environment to inspect, defaults to ``os.environ``
            proc_version_path: Kernel version file used to recognize WSL
        """
        self.settings = settings
        self.platform = platform if platform is not None else sys.platform
        self.environ = environ if environ is not None else os.environ
        self.proc_version_path = Path(proc_version_path)
        self._kind: BackendKind | None = None

    def detect(self) -> BackendKind:
        """Get the active backend kind, detecting it on first call.

        Returns:
            Detected or configured backend kind

        Raises:
            UnsupportedPlatformError: If the platform has no backend
        """
        if self._kind is None:
            self._kind = self._detect()
            logger.info(
                "capture_backend_detected",
                backend=self._kind.value,
                platform=self.platform,
                override=self.settings.backend != "auto",
            )
        return self._kind

    def _detect(self) -> BackendKind:
        if self.settings.backend != "auto":
            return BackendKind(self.settings.backend)

        if self.platform.startswith("win"):
            return BackendKind.WINDOWS
        if self.platform == "darwin":
            return BackendKind.MACOS
        if self.platform.startswith("linux"):
            if self._is_wsl():
                return BackendKind.WSL
            return self._detect_linux_display_server()

        raise UnsupportedPlatformError(self.platform)

    def _is_wsl(self) -> bool:
        """Check the kernel version string for the WSL signature."""
        try:
            version = self.proc_version_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return False
        return "microsoft" in version.lower()

    def _detect_linux_display_server(self) -> BackendKind:
        """Prefer Wayland when its socket is advertised, then X11, then default to X11."""
        if self.environ.get("WAYLAND_DISPLAY"):
            return BackendKind.WAYLAND
        if self.environ.get("DISPLAY"):
            return BackendKind.X11
        logger.debug("display_server_not_advertised", default=BackendKind.X11.value)
        return BackendKind.X11

    def create_backend(self, runner: CommandRunner | None = None) -> ICaptureBackend:
        """Build the backend for the detected platform.

        Args:
            runner: Command runner for tool-based backends, a
                :class:`SubprocessRunner` honoring ``command_timeout`` if not given

        Returns:
            Backend instance
        """
        kind = self.detect()
        runner = runner or SubprocessRunner(timeout=self.settings.command_timeout)

        if kind is BackendKind.X11:
            from .backends.x11 import X11Backend

            return X11Backend(self.settings, runner)
        elif kind is BackendKind.WAYLAND:
            from .backends.wayland import WaylandBackend

            return WaylandBackend(self.settings, runner)
        elif kind is BackendKind.MACOS:
            from .backends.macos import MacOSBackend

            return MacOSBackend(self.settings, runner)
        elif kind is BackendKind.WSL:
            from .backends.wsl import WSLBackend

            return WSLBackend(self.settings, runner)
        else:
            from .backends.windows import WindowsBackend

            return WindowsBackend(self.settings)
