"""deskcapture - cross-platform desktop capture.

Capture the full screen, a display, a region of the virtual desktop or a
single window through one contract, backed by X11 tools, Wayland tools,
macOS ``screencapture``, the native Windows API or a WSL bridge to the
Windows host.
"""

__version__ = "0.1.0"

from .base_exceptions import DeskCaptureException
from .capture_exceptions import (
    CaptureException,
    CaptureFailedError,
    CommandError,
    DisplayNotFoundError,
    ErrorCode,
    InvalidPatternError,
    InvalidRegionError,
    PathValidationError,
    RateLimitError,
    UnsupportedPlatformError,
    WindowNotFoundError,
    format_error_response,
)
from .config import CaptureSettings, get_settings, reset_settings
from .coordinates import (
    ValidatedRegion,
    VirtualDesktopBounds,
    clip_to_boundaries,
    is_within_bounds,
    validate_coordinates,
)
from .directory import DisplayWindowDirectory
from .dispatcher import BackendKind, PlatformDispatcher
from .engine import CaptureEngine, create_capture_engine
from .interfaces import ICaptureBackend
from .models import DisplayInfo, Position, RegionInfo, Resolution, WindowInfo
from .process import Command, CommandRunner, SubprocessRunner

__all__ = [
    # Engine
    "CaptureEngine",
    "create_capture_engine",
    "PlatformDispatcher",
    "BackendKind",
    "DisplayWindowDirectory",
    "ICaptureBackend",
    # Data model
    "DisplayInfo",
    "WindowInfo",
    "RegionInfo",
    "Resolution",
    "Position",
    # Geometry
    "ValidatedRegion",
    "VirtualDesktopBounds",
    "validate_coordinates",
    "clip_to_boundaries",
    "is_within_bounds",
    # Processes
    "Command",
    "CommandRunner",
    "SubprocessRunner",
    # Configuration
    "CaptureSettings",
    "get_settings",
    "reset_settings",
    # Errors
    "DeskCaptureException",
    "CaptureException",
    "CaptureFailedError",
    "CommandError",
    "DisplayNotFoundError",
    "ErrorCode",
    "InvalidPatternError",
    "InvalidRegionError",
    "PathValidationError",
    "RateLimitError",
    "UnsupportedPlatformError",
    "WindowNotFoundError",
    "format_error_response",
]
