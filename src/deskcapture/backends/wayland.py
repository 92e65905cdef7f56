"""Wayland capture backend using ``grim``, ``wlr-randr`` and ``swaymsg``.

Wayland compositors do not let clients read other windows directly, so
window capture grabs the window's rectangle from the compositor output
with ``grim -g``. Window geometry comes from the sway IPC tree.
"""

import json
from typing import Any

from ..capture_exceptions import CommandError, WindowNotFoundError
from ..config import CaptureSettings
from ..imaging import require_image
from ..interfaces.capture_backend import ICaptureBackend
from ..logging import get_logger
from ..models import DisplayInfo, RegionInfo, WindowInfo
from ..parsers.wayland import (
    content_rect,
    find_window_node,
    frame_rect,
    parse_sway_outputs,
    parse_sway_tree,
    parse_wlr_randr,
)
from ..process import Command, CommandRunner, run_text

logger = get_logger(__name__)


class WaylandBackend(ICaptureBackend):
    """Capture through a wlroots-based Wayland compositor."""

    name = "wayland"

    def __init__(self, settings: CaptureSettings, runner: CommandRunner) -> None:
        """Initialize the backend.

        Args:
            settings: Capture settings
            runner: Command runner
        """
        self.settings = settings
        self.runner = runner

    def _grim(self, *args: str) -> bytes:
        return self.runner(Command(args=("grim", *args, "-")))

    def _get_tree(self) -> dict[str, Any]:
        tree: dict[str, Any] = json.loads(run_text(self.runner, "swaymsg", "-t", "get_tree"))
        return tree

    def capture_screen(self, display: DisplayInfo | None = None) -> bytes:
        """Capture all outputs, or one output by name."""
        args = ("-o", display.id) if display is not None else ()
        return require_image(self._grim(*args), "capture_screen")

    def capture_window(self, window: WindowInfo, include_frame: bool) -> bytes:
        """Capture the window's frame or content rectangle.

        The tree is re-read so both rectangles reflect the window's current
        geometry and borders.

        Raises:
            WindowNotFoundError: If the compositor no longer reports the window
        """
        node = find_window_node(self._get_tree(), window.id)
        if node is None:
            raise WindowNotFoundError(f"Window not found: {window.id}", window_id=window.id)

        rect = frame_rect(node) if include_frame else content_rect(node)
        logger.debug(
            "wayland_window_geometry",
            window_id=window.id,
            include_frame=include_frame,
            region=rect.to_dict(),
        )
        return require_image(self._grim("-g", _geometry(rect)), "capture_window")

    def capture_region_internal(self, region: RegionInfo) -> bytes:
        """Capture a rectangle in compositor layout coordinates."""
        return require_image(self._grim("-g", _geometry(region)), "capture_region")

    def get_displays(self) -> list[DisplayInfo]:
        """Enumerate outputs with ``wlr-randr``, falling back to sway IPC."""
        try:
            return parse_wlr_randr(run_text(self.runner, "wlr-randr"))
        except CommandError as e:
            logger.debug("wlr_randr_unavailable", error=str(e))

        outputs = json.loads(run_text(self.runner, "swaymsg", "-t", "get_outputs"))
        return parse_sway_outputs(outputs)

    def get_windows(self) -> list[WindowInfo]:
        """Enumerate windows from the sway tree."""
        return parse_sway_tree(self._get_tree())


def _geometry(region: RegionInfo) -> str:
    """Format a rectangle as a grim geometry string (``X,Y WxH``)."""
    return f"{region.x},{region.y} {region.width}x{region.height}"
