"""Parsers for Wayland compositor tooling (``wlr-randr`` and ``swaymsg``)."""

import re
from collections.abc import Iterator
from typing import Any

from ..models import DisplayInfo, Position, RegionInfo, Resolution, WindowInfo
from .x11 import UNKNOWN_PROCESS

_MODE_LINE = re.compile(r"^\s+(\d+)x(\d+)\s+px\b(.*)$")
_POSITION_LINE = re.compile(r"^\s+Position:\s*(-?\d+),\s*(-?\d+)")
_ENABLED_LINE = re.compile(r"^\s+Enabled:\s*(\w+)")

WINDOW_NODE_TYPES = ("con", "floating_con")


def parse_wlr_randr(output: str) -> list[DisplayInfo]:
    """Parse the human-readable output of ``wlr-randr``.

    An unindented line opens a new output block::

        HDMI-A-1 "Dell Inc. DELL U2415 (HDMI-A-1)"
          Enabled: yes
          Modes:
            1920x1200 px, 59.950001 Hz (preferred, current)
            1920x1080 px, 60.000000 Hz
          Position: 0,0

    The resolution is taken from the mode marked ``current``, falling back
    to the first listed mode. Disabled outputs are skipped and the first
    reported output is primary.

    Args:
        output: Raw wlr-randr text

    Returns:
        Displays in output order
    """
    blocks: list[dict[str, Any]] = []
    for line in output.splitlines():
        if not line.strip():
            continue

        if not line[0].isspace():
            blocks.append({"name": line.split()[0], "modes": [], "position": (0, 0)})
            continue

        if not blocks:
            continue
        block = blocks[-1]

        mode = _MODE_LINE.match(line)
        if mode:
            width, height, flags = mode.groups()
            block["modes"].append((int(width), int(height), "current" in flags))
            continue

        position = _POSITION_LINE.match(line)
        if position:
            block["position"] = (int(position.group(1)), int(position.group(2)))
            continue

        enabled = _ENABLED_LINE.match(line)
        if enabled:
            block["enabled"] = enabled.group(1).lower() == "yes"

    displays = []
    for block in blocks:
        if not block.get("enabled", True) or not block["modes"]:
            continue

        current = next((m for m in block["modes"] if m[2]), block["modes"][0])
        displays.append(
            DisplayInfo(
                id=block["name"],
                name=block["name"],
                resolution=Resolution(current[0], current[1]),
                position=Position(*block["position"]),
                is_primary=not displays,
            )
        )
    return displays


def parse_sway_outputs(outputs: list[dict[str, Any]]) -> list[DisplayInfo]:
    """Parse the JSON document of ``swaymsg -t get_outputs``.

    Args:
        outputs: Decoded JSON array

    Returns:
        Active outputs, the focused one marked primary
    """
    displays = []
    focused_seen = False
    for output in outputs:
        if not output.get("active", True):
            continue

        rect = output.get("rect") or {}
        width = int(rect.get("width", 0))
        height = int(rect.get("height", 0))
        if width <= 0 or height <= 0:
            continue

        is_focused = bool(output.get("focused")) and not focused_seen
        focused_seen = focused_seen or is_focused
        name = output.get("name", "")
        make = output.get("make")
        displays.append(
            DisplayInfo(
                id=name,
                name=f"{make} {output.get('model', '')}".strip() if make else name,
                resolution=Resolution(width, height),
                position=Position(int(rect.get("x", 0)), int(rect.get("y", 0))),
                is_primary=is_focused,
            )
        )
    return displays


def iter_window_nodes(node: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Walk a sway tree depth first, yielding window nodes.

    A window node is a container (tiled or floating) that has a name and
    an owning pid; workspaces and split containers are traversed but not
    yielded.
    """
    if node.get("type") in WINDOW_NODE_TYPES and node.get("name") and node.get("pid"):
        yield node

    for child in node.get("nodes", []):
        yield from iter_window_nodes(child)
    for child in node.get("floating_nodes", []):
        yield from iter_window_nodes(child)


def _rect(rect: dict[str, Any] | None) -> RegionInfo:
    rect = rect or {}
    return RegionInfo(
        int(rect.get("x", 0)),
        int(rect.get("y", 0)),
        int(rect.get("width", 0)),
        int(rect.get("height", 0)),
    )


def frame_rect(node: dict[str, Any]) -> RegionInfo:
    """Get the container rectangle, including borders and title bar."""
    return _rect(node.get("rect"))


def content_rect(node: dict[str, Any]) -> RegionInfo:
    """Get the client area rectangle of a window node.

    ``window_rect`` is relative to the container, so it is offset by the
    container origin. Nodes without a ``window_rect`` fall back to the
    container rectangle.
    """
    outer = frame_rect(node)
    inner = node.get("window_rect")
    if not inner or not inner.get("width") or not inner.get("height"):
        return outer

    relative = _rect(inner)
    return RegionInfo(
        outer.x + relative.x, outer.y + relative.y, relative.width, relative.height
    )


def parse_sway_tree(tree: dict[str, Any]) -> list[WindowInfo]:
    """Parse the JSON document of ``swaymsg -t get_tree``.

    Args:
        tree: Decoded root node

    Returns:
        Windows in tree order with frame rectangles as bounds
    """
    windows = []
    for node in iter_window_nodes(tree):
        properties = node.get("window_properties") or {}
        windows.append(
            WindowInfo(
                id=str(node["id"]),
                title=node["name"],
                process_name=node.get("app_id") or properties.get("class") or UNKNOWN_PROCESS,
                pid=int(node["pid"]),
                bounds=frame_rect(node),
                is_minimized=not node.get("visible", True),
            )
        )
    return windows


def find_window_node(tree: dict[str, Any], window_id: str) -> dict[str, Any] | None:
    """Find a window node by its stringified id."""
    return next((n for n in iter_window_nodes(tree) if str(n["id"]) == window_id), None)
