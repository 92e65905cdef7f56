"""Native Windows capture backend.

Pixels are grabbed in-process with MSS (GDI) and encoded to PNG with
Pillow. Window enumeration and geometry come from user32 through ctypes.
"""

import ctypes
from collections.abc import Callable
from typing import Any

import mss

from ..capture_exceptions import WindowNotFoundError
from ..config import CaptureSettings
from ..imaging import encode_png, require_image
from ..interfaces.capture_backend import ICaptureBackend
from ..logging import get_logger
from ..models import DisplayInfo, RegionInfo, WindowInfo
from ..parsers.windows import Win32WindowRecord, parse_mss_monitors, parse_win32_windows
from ..process import process_name_for_pid

logger = get_logger(__name__)


class Win32Api:
    """Thin ctypes wrapper over the user32 calls the backend needs.

    Only constructible on Windows.
    """

    def __init__(self) -> None:
        """Load user32 and opt into per-process DPI awareness."""
        from ctypes import wintypes

        self._wintypes = wintypes
        self._user32 = ctypes.WinDLL("user32", use_last_error=True)  # type: ignore[attr-defined]
        self._enum_proc = ctypes.WINFUNCTYPE(  # type: ignore[attr-defined]
            wintypes.BOOL, wintypes.HWND, wintypes.LPARAM
        )
        # Physical pixel coordinates, matching what MSS grabs
        self._user32.SetProcessDPIAware()

    def _rect(self, getter: Callable[..., Any], hwnd: int) -> Any:
        rect = self._wintypes.RECT()
        if not getter(self._wintypes.HWND(hwnd), ctypes.byref(rect)):
            raise ctypes.WinError(ctypes.get_last_error())  # type: ignore[attr-defined]
        return rect

    def window_title(self, hwnd: int) -> str:
        """Read a window's title."""
        length = self._user32.GetWindowTextLengthW(self._wintypes.HWND(hwnd))
        if length <= 0:
            return ""
        buffer = ctypes.create_unicode_buffer(length + 1)
        self._user32.GetWindowTextW(self._wintypes.HWND(hwnd), buffer, length + 1)
        return buffer.value

    def window_pid(self, hwnd: int) -> int:
        """Get the id of the process owning a window."""
        pid = self._wintypes.DWORD()
        self._user32.GetWindowThreadProcessId(self._wintypes.HWND(hwnd), ctypes.byref(pid))
        return int(pid.value)

    def is_iconic(self, hwnd: int) -> bool:
        """Check whether a window is minimized."""
        return bool(self._user32.IsIconic(self._wintypes.HWND(hwnd)))

    def window_rect(self, hwnd: int, include_frame: bool) -> tuple[int, int, int, int]:
        """Get a window's screen rectangle as (left, top, right, bottom).

        Args:
            hwnd: Window handle
            include_frame: Outer window rectangle when True, client area
                translated to screen coordinates when False
        """
        if include_frame:
            rect = self._rect(self._user32.GetWindowRect, hwnd)
            return rect.left, rect.top, rect.right, rect.bottom

        rect = self._rect(self._user32.GetClientRect, hwnd)
        origin = self._wintypes.POINT(0, 0)
        self._user32.ClientToScreen(self._wintypes.HWND(hwnd), ctypes.byref(origin))
        return origin.x, origin.y, origin.x + rect.right, origin.y + rect.bottom

    def is_visible(self, hwnd: int) -> bool:
        """Check whether a window has the WS_VISIBLE style."""
        return bool(self._user32.IsWindowVisible(self._wintypes.HWND(hwnd)))

    def window_handles(self) -> list[int]:
        """List top-level window handles in ``EnumWindows`` order."""
        handles: list[int] = []

        def collect(hwnd: Any, _lparam: Any) -> bool:
            handles.append(int(hwnd))
            return True

        self._user32.EnumWindows(self._enum_proc(collect), 0)
        return handles

    def enumerate_windows(self) -> list[Win32WindowRecord]:
        """Read every titled top-level window in ``EnumWindows`` order.

        Windows destroyed between enumeration and the geometry query are
        skipped.
        """
        records = []
        for hwnd in self.window_handles():
            visible = self.is_visible(hwnd)
            title = self.window_title(hwnd) if visible else ""
            if not title:
                continue
            try:
                rect = self.window_rect(hwnd, include_frame=True)
            except OSError as e:
                logger.debug("windows_window_skipped", hwnd=hwnd, error=str(e))
                continue
            pid = self.window_pid(hwnd)
            records.append(
                Win32WindowRecord(
                    hwnd=hwnd,
                    title=title,
                    pid=pid,
                    process_name=process_name_for_pid(pid),
                    rect=rect,
                    visible=visible,
                    iconic=self.is_iconic(hwnd),
                )
            )
        return records


class WindowsBackend(ICaptureBackend):
    """Capture on Windows with MSS, Pillow and user32."""

    name = "windows"

    def __init__(
        self,
        settings: CaptureSettings,
        api: Win32Api | None = None,
        screen_factory: Callable[[], Any] = mss.mss,
    ) -> None:
        """Initialize the backend.

        Args:
            settings: Capture settings
            api: user32 wrapper, created on first use when not given
            screen_factory: Factory for MSS grabber instances
        """
        self.settings = settings
        self._api = api
        self._screen_factory = screen_factory

    @property
    def api(self) -> Win32Api:
        """Get or create the user32 wrapper."""
        if self._api is None:
            self._api = Win32Api()
        return self._api

    def _grab(self, monitor: dict[str, int]) -> bytes:
        # A fresh MSS instance per grab; GDI handles are thread-bound
        with self._screen_factory() as sct:
            shot = sct.grab(monitor)
            return encode_png(shot.size, shot.bgra)

    def capture_screen(self, display: DisplayInfo | None = None) -> bytes:
        """Capture the whole virtual screen, or one display."""
        if display is None:
            with self._screen_factory() as sct:
                monitor = dict(sct.monitors[0])
            return require_image(self._grab(monitor), "capture_screen")

        return require_image(self._grab(_monitor(display.bounds)), "capture_screen")

    def capture_window(self, window: WindowInfo, include_frame: bool) -> bytes:
        """Capture a window's outer or client rectangle from the screen."""
        hwnd = int(window.id)
        if self.api.is_iconic(hwnd):
            raise WindowNotFoundError("Window is minimized", window_id=window.id, minimized=True)

        left, top, right, bottom = self.api.window_rect(hwnd, include_frame)
        region = RegionInfo(left, top, right - left, bottom - top)
        logger.debug(
            "windows_window_geometry",
            window_id=window.id,
            include_frame=include_frame,
            region=region.to_dict(),
        )
        return require_image(self._grab(_monitor(region)), "capture_window")

    def capture_region_internal(self, region: RegionInfo) -> bytes:
        """Capture a rectangle of the virtual screen."""
        return require_image(self._grab(_monitor(region)), "capture_region")

    def get_displays(self) -> list[DisplayInfo]:
        """Enumerate monitors through MSS."""
        with self._screen_factory() as sct:
            monitors = [dict(mon) for mon in sct.monitors]
        return parse_mss_monitors(monitors)

    def get_windows(self) -> list[WindowInfo]:
        """Enumerate top-level windows through user32."""
        return parse_win32_windows(self.api.enumerate_windows())


def _monitor(region: RegionInfo) -> dict[str, int]:
    """Convert a rectangle to an MSS monitor dict."""
    return {"left": region.x, "top": region.y, "width": region.width, "height": region.height}
