"""macOS capture backend using ``screencapture``.

``screencapture`` only writes to files, so every capture goes through a
private temporary directory that is removed before the call returns.
"""

import json
import tempfile
from pathlib import Path

from ..config import CaptureSettings
from ..imaging import require_image
from ..interfaces.capture_backend import ICaptureBackend
from ..logging import get_logger
from ..models import DisplayInfo, RegionInfo, WindowInfo
from ..parsers.macos import WINDOW_LIST_SCRIPT, parse_system_profiler, parse_window_rows
from ..process import Command, CommandRunner, run_text

logger = get_logger(__name__)


class MacOSBackend(ICaptureBackend):
    """Capture on macOS.

    Requires the Screen Recording permission for the hosting process.
    """

    name = "macos"

    def __init__(self, settings: CaptureSettings, runner: CommandRunner) -> None:
        """Initialize the backend.

        Args:
            settings: Capture settings
            runner: Command runner
        """
        self.settings = settings
        self.runner = runner

    def _screencapture(self, *args: str) -> bytes:
        """Run ``screencapture`` silently into a temporary PNG and read it back."""
        with tempfile.TemporaryDirectory(prefix="deskcapture-") as tmp:
            output = Path(tmp) / "capture.png"
            self.runner(Command(args=("screencapture", "-x", "-t", "png", *args, str(output))))
            if not output.exists():
                logger.warning("screencapture_no_output", args=list(args))
                return b""
            return output.read_bytes()

    def capture_screen(self, display: DisplayInfo | None = None) -> bytes:
        """Capture the main display, or one display by index."""
        args = ("-D", display.id) if display is not None else ()
        return require_image(self._screencapture(*args), "capture_screen")

    def capture_window(self, window: WindowInfo, include_frame: bool) -> bytes:
        """Capture one window; ``-o`` drops the window shadow for content-only capture."""
        args = ["-l", window.id]
        if not include_frame:
            args.insert(0, "-o")
        return require_image(self._screencapture(*args), "capture_window")

    def capture_region_internal(self, region: RegionInfo) -> bytes:
        """Capture a rectangle in global display coordinates."""
        rect = f"{region.x},{region.y},{region.width},{region.height}"
        return require_image(self._screencapture("-R", rect), "capture_region")

    def get_displays(self) -> list[DisplayInfo]:
        """Enumerate displays with ``system_profiler``."""
        output = run_text(self.runner, "system_profiler", "SPDisplaysDataType", "-json")
        return parse_system_profiler(json.loads(output))

    def get_windows(self) -> list[WindowInfo]:
        """Enumerate windows through System Events."""
        return parse_window_rows(run_text(self.runner, "osascript", "-e", WINDOW_LIST_SCRIPT))
