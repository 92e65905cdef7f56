"""X11 capture backend using ImageMagick ``import``, ``xrandr`` and ``wmctrl``."""

from ..config import CaptureSettings
from ..imaging import require_image
from ..interfaces.capture_backend import ICaptureBackend
from ..logging import get_logger
from ..models import DisplayInfo, RegionInfo, WindowInfo
from ..parsers.x11 import parse_wmctrl, parse_xrandr
from ..process import Command, CommandRunner, process_name_for_pid, run_text

logger = get_logger(__name__)


class X11Backend(ICaptureBackend):
    """Capture through an X server.

    Pixels come from ImageMagick's ``import`` reading the root window (for
    screens and regions) or a single window. Displays are read from
    ``xrandr`` and windows from ``wmctrl``.
    """

    name = "x11"

    def __init__(self, settings: CaptureSettings, runner: CommandRunner) -> None:
        """Initialize the backend.

        Args:
            settings: Capture settings, ``x11_display`` selects the X server
            runner: Command runner
        """
        self.settings = settings
        self.runner = runner
        self._env = {"DISPLAY": settings.x11_display} if settings.x11_display else None

    def _import(self, *args: str) -> bytes:
        return self.runner(Command(args=("import", *args, "png:-"), env=self._env))

    def capture_screen(self, display: DisplayInfo | None = None) -> bytes:
        """Capture the root window, cropped to one output when given."""
        if display is None:
            return require_image(self._import("-window", "root"), "capture_screen")

        return require_image(
            self._import("-window", "root", "-crop", _geometry(display.bounds), "+repage"),
            "capture_screen",
        )

    def capture_window(self, window: WindowInfo, include_frame: bool) -> bytes:
        """Capture one window, with ``-frame`` adding the window manager frame."""
        args = ["-frame"] if include_frame else []
        return require_image(
            self._import(*args, "-window", window.id), "capture_window"
        )

    def capture_region_internal(self, region: RegionInfo) -> bytes:
        """Capture a rectangle of the root window."""
        return require_image(
            self._import("-window", "root", "-crop", _geometry(region), "+repage"),
            "capture_region",
        )

    def get_displays(self) -> list[DisplayInfo]:
        """Enumerate connected outputs with ``xrandr --query``."""
        return parse_xrandr(run_text(self.runner, "xrandr", "--query", env=self._env))

    def get_windows(self) -> list[WindowInfo]:
        """Enumerate managed windows with ``wmctrl -lGp``."""
        output = run_text(self.runner, "wmctrl", "-lGp", env=self._env)
        windows = parse_wmctrl(output, process_name=process_name_for_pid)
        logger.debug("x11_windows_listed", count=len(windows))
        return windows


def _geometry(region: RegionInfo) -> str:
    """Format a rectangle as an X geometry string (``WxH+X+Y``)."""
    return f"{region.width}x{region.height}+{region.x}+{region.y}"
