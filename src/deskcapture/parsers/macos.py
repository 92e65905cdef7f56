"""Parsers for macOS enumeration (``system_profiler`` and System Events)."""

import re
from typing import Any

from ..models import DisplayInfo, Position, RegionInfo, Resolution, WindowInfo

_RESOLUTION = re.compile(r"(\d+)\s*x\s*(\d+)")

# Field order of the rows emitted by WINDOW_LIST_SCRIPT
WINDOW_FIELDS = ("process", "pid", "title", "id", "x", "y", "width", "height", "minimized")

WINDOW_LIST_SCRIPT = """
set rows to {}
tell application "System Events"
    repeat with proc in (application processes whose visible is true)
        set procName to name of proc
        set procPID to unix id of proc
        repeat with win in windows of proc
            try
                set winPos to position of win
                set winSize to size of win
                set winMin to false
                try
                    set winMin to value of attribute "AXMinimized" of win
                end try
                set end of rows to procName & tab & (procPID as text) & tab & (name of win as text) & tab & (id of win as text) & tab & (item 1 of winPos as text) & tab & (item 2 of winPos as text) & tab & (item 1 of winSize as text) & tab & (item 2 of winSize as text) & tab & (winMin as text)
            end try
        end repeat
    end repeat
end tell
set AppleScript's text item delimiters to linefeed
return rows as text
"""


def _parse_resolution(entry: dict[str, Any]) -> tuple[int, int] | None:
    # Sizes are in points, the space screencapture -R works in; the
    # physical pixel size is only used when nothing else is reported
    for key in ("_spdisplays_resolution", "spdisplays_resolution", "_spdisplays_pixels"):
        value = entry.get(key)
        if not isinstance(value, str):
            continue
        match = _RESOLUTION.search(value)
        if match:
            return int(match.group(1)), int(match.group(2))
    return None


def parse_system_profiler(data: dict[str, Any]) -> list[DisplayInfo]:
    """Parse ``system_profiler SPDisplaysDataType -json`` output.

    system_profiler does not report arrangement, so displays are laid out
    left to right in enumeration order. Sizes and positions are in points
    so they share the coordinate space of ``screencapture -R``. Ids are
    1-based indices matching ``screencapture -D``.

    Args:
        data: Decoded JSON document

    Returns:
        Displays in enumeration order
    """
    displays = []
    next_x = 0
    for gpu in data.get("SPDisplaysDataType", []):
        for entry in gpu.get("spdisplays_ndrvs", []):
            resolution = _parse_resolution(entry)
            if resolution is None:
                continue

            width, height = resolution
            index = len(displays) + 1
            displays.append(
                DisplayInfo(
                    id=str(index),
                    name=entry.get("_name") or f"Display {index}",
                    resolution=Resolution(width, height),
                    position=Position(next_x, 0),
                    is_primary=entry.get("spdisplays_main") == "spdisplays_yes",
                )
            )
            next_x += width
    return displays


def parse_window_rows(output: str) -> list[WindowInfo]:
    """Parse the tab-separated rows produced by :data:`WINDOW_LIST_SCRIPT`.

    Rows with missing or non-numeric fields are skipped. The minimized
    column is optional.

    Args:
        output: Raw osascript stdout

    Returns:
        Windows in process order
    """
    windows = []
    for line in output.splitlines():
        fields = line.split("\t")
        if len(fields) < len(WINDOW_FIELDS) - 1:
            continue

        row = dict(zip(WINDOW_FIELDS, fields))
        try:
            window = WindowInfo(
                id=row["id"].strip(),
                title=row["title"],
                process_name=row["process"],
                pid=int(row["pid"]),
                bounds=RegionInfo(
                    int(float(row["x"])),
                    int(float(row["y"])),
                    int(float(row["width"])),
                    int(float(row["height"])),
                ),
                is_minimized=row.get("minimized", "false").strip().lower() == "true",
            )
        except ValueError:
            continue

        if window.id:
            windows.append(window)
    return windows
