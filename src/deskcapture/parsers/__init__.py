"""Pure parsers turning raw enumeration output into normalized records.

Nothing in this package spawns processes or touches the display server, so
every parser can be tested with captured tool output.
"""

from .macos import parse_system_profiler, parse_window_rows
from .wayland import parse_sway_outputs, parse_sway_tree, parse_wlr_randr
from .windows import (
    Win32WindowRecord,
    parse_mss_monitors,
    parse_powershell_displays,
    parse_powershell_windows,
    parse_win32_windows,
)
from .x11 import parse_wmctrl, parse_xrandr

__all__ = [
    "Win32WindowRecord",
    "parse_mss_monitors",
    "parse_powershell_displays",
    "parse_powershell_windows",
    "parse_sway_outputs",
    "parse_sway_tree",
    "parse_system_profiler",
    "parse_win32_windows",
    "parse_window_rows",
    "parse_wlr_randr",
    "parse_wmctrl",
    "parse_xrandr",
]
