"""Parsers for Windows enumeration data.

Two sources feed these parsers: native records gathered in-process (the
``mss`` monitor list and user32 window records) and the JSON documents a
``powershell.exe`` bridge prints when running under WSL.
"""

import json
from dataclasses import dataclass
from typing import Any

from ..models import DisplayInfo, Position, RegionInfo, Resolution, WindowInfo
from .x11 import UNKNOWN_PROCESS


@dataclass(frozen=True)
class Win32WindowRecord:
    """Raw window data read through user32."""

    hwnd: int
    title: str
    pid: int
    process_name: str | None
    rect: tuple[int, int, int, int]
    visible: bool
    iconic: bool


def parse_mss_monitors(monitors: list[dict[str, int]]) -> list[DisplayInfo]:
    """Convert the ``mss`` monitor list to displays.

    ``monitors[0]`` is the combined virtual screen and is skipped. The
    monitor anchored at the origin is primary on Windows.

    Args:
        monitors: ``mss.mss().monitors``

    Returns:
        Physical displays with 0-based index ids
    """
    physical = monitors[1:]
    primary_index = next(
        (i for i, mon in enumerate(physical) if mon["left"] == 0 and mon["top"] == 0), 0
    )
    return [
        DisplayInfo(
            id=str(i),
            name=f"Display {i + 1}",
            resolution=Resolution(mon["width"], mon["height"]),
            position=Position(mon["left"], mon["top"]),
            is_primary=i == primary_index,
        )
        for i, mon in enumerate(physical)
    ]


def parse_win32_windows(records: list[Win32WindowRecord]) -> list[WindowInfo]:
    """Convert user32 window records to windows.

    Invisible windows, untitled windows and windows with an empty rectangle
    are dropped, which filters out tool windows and message-only windows.

    Args:
        records: Records in ``EnumWindows`` order

    Returns:
        Capturable top-level windows
    """
    windows = []
    for record in records:
        left, top, right, bottom = record.rect
        width, height = right - left, bottom - top
        if not record.visible or not record.title or width <= 0 or height <= 0:
            continue

        windows.append(
            WindowInfo(
                id=str(record.hwnd),
                title=record.title,
                process_name=record.process_name or UNKNOWN_PROCESS,
                pid=record.pid,
                bounds=RegionInfo(left, top, width, height),
                is_minimized=record.iconic,
            )
        )
    return windows


def _load_json_list(output: str) -> list[dict[str, Any]]:
    """Decode ``ConvertTo-Json`` output, which is a bare object for one item."""
    text = output.strip()
    if not text:
        return []

    data = json.loads(text)
    if isinstance(data, dict):
        return [data]
    return [item for item in data if isinstance(item, dict)]


def parse_powershell_displays(output: str) -> list[DisplayInfo]:
    """Parse the display JSON printed by the PowerShell bridge.

    Args:
        output: Raw stdout of the display listing script

    Returns:
        Displays in ``Screen.AllScreens`` order

    Raises:
        ValueError: If the output is not valid JSON
    """
    displays = []
    for item in _load_json_list(output):
        displays.append(
            DisplayInfo(
                id=str(item.get("id", len(displays))),
                name=item.get("name") or f"Display {len(displays) + 1}",
                resolution=Resolution(int(item["width"]), int(item["height"])),
                position=Position(int(item.get("x", 0)), int(item.get("y", 0))),
                is_primary=bool(item.get("primary")),
            )
        )
    return displays


def parse_powershell_windows(output: str) -> list[WindowInfo]:
    """Parse the window JSON printed by the PowerShell bridge.

    Entries without a window handle are dropped.

    Args:
        output: Raw stdout of the window listing script

    Returns:
        Windows in process order

    Raises:
        ValueError: If the output is not valid JSON
    """
    windows = []
    for item in _load_json_list(output):
        if not item.get("id"):
            continue

        windows.append(
            WindowInfo(
                id=str(item["id"]),
                title=item.get("title") or "",
                process_name=item.get("processName") or UNKNOWN_PROCESS,
                pid=int(item.get("processId", 0)),
                bounds=RegionInfo(
                    int(item.get("x", 0)),
                    int(item.get("y", 0)),
                    int(item.get("width", 0)),
                    int(item.get("height", 0)),
                ),
                is_minimized=bool(item.get("isMinimized")),
            )
        )
    return windows
