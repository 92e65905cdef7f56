"""Parsers for X11 tool output (``xrandr`` and ``wmctrl``)."""

import re
from collections.abc import Callable

from ..models import DisplayInfo, Position, RegionInfo, Resolution, WindowInfo

_XRANDR_OUTPUT = re.compile(
    r"^(\S+)\s+connected\s+(primary\s+)?(\d+)x(\d+)\+(-?\d+)\+(-?\d+)"
)

UNKNOWN_PROCESS = "unknown"


def parse_xrandr(output: str) -> list[DisplayInfo]:
    """Parse ``xrandr --query`` output.

    Only connected outputs with an active mode are reported, for example::

        HDMI-1 connected primary 1920x1080+0+0 (normal left inverted) 527mm x 296mm

    Args:
        output: Raw xrandr text

    Returns:
        Displays in output order, the output name doubling as id
    """
    displays = []
    for line in output.splitlines():
        match = _XRANDR_OUTPUT.match(line)
        if not match:
            continue

        name, primary, width, height, x, y = match.groups()
        displays.append(
            DisplayInfo(
                id=name,
                name=name,
                resolution=Resolution(int(width), int(height)),
                position=Position(int(x), int(y)),
                is_primary=primary is not None,
            )
        )
    return displays


def parse_wmctrl(
    output: str, process_name: Callable[[int], str | None] | None = None
) -> list[WindowInfo]:
    """Parse ``wmctrl -lGp`` output.

    Each line holds ``id desktop pid x y width height host title...``; the
    title is everything after the host column and may contain spaces or be
    empty. wmctrl cannot report minimized state, so windows are reported as
    visible.

    Args:
        output: Raw wmctrl text
        process_name: Optional lookup from pid to process name

    Returns:
        Windows in stacking order
    """
    windows = []
    for line in output.splitlines():
        parts = line.split(None, 8)
        if len(parts) < 8:
            continue

        window_id, _desktop, pid, x, y, width, height = parts[:7]
        title = parts[8] if len(parts) > 8 else ""

        try:
            pid_value = int(pid)
            bounds = RegionInfo(int(x), int(y), int(width), int(height))
        except ValueError:
            continue

        name = process_name(pid_value) if process_name and pid_value > 0 else None
        windows.append(
            WindowInfo(
                id=window_id,
                title=title.strip(),
                process_name=name or UNKNOWN_PROCESS,
                pid=pid_value,
                bounds=bounds,
                is_minimized=False,
            )
        )
    return windows
