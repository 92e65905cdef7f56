"""Platform capture backends.

Each backend is a flat implementation of :class:`ICaptureBackend`; the
dispatcher picks exactly one per engine.
"""

from .macos import MacOSBackend
from .wayland import WaylandBackend
from .windows import Win32Api, WindowsBackend
from .wsl import WSLBackend
from .x11 import X11Backend

__all__ = [
    "MacOSBackend",
    "WSLBackend",
    "WaylandBackend",
    "Win32Api",
    "WindowsBackend",
    "X11Backend",
]
