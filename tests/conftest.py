"""Pytest configuration and fixtures.

No test spawns a real process or touches a display server: tool-based
backends get a :class:`FakeRunner`, and engine tests use a
:class:`FakeBackend` with scripted enumeration results.
"""

import io
import os
from collections.abc import Callable

import pytest
from PIL import Image

# Keep test output free of capture logs
os.environ.setdefault("DESKCAPTURE_DISABLE_CONSOLE_LOGGING", "1")

from deskcapture.capture_exceptions import CommandError  # noqa: E402
from deskcapture.config import CaptureSettings, reset_settings  # noqa: E402
from deskcapture.interfaces import ICaptureBackend  # noqa: E402
from deskcapture.models import (  # noqa: E402
    DisplayInfo,
    Position,
    RegionInfo,
    Resolution,
    WindowInfo,
)
from deskcapture.process import Command  # noqa: E402

Response = bytes | str | Exception | Callable[[Command], bytes]


def make_png(width: int, height: int, color: tuple[int, int, int] = (40, 80, 120)) -> bytes:
    """Create a solid PNG of the given size."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_display(
    display_id: str,
    x: int = 0,
    y: int = 0,
    width: int = 1920,
    height: int = 1080,
    primary: bool = False,
) -> DisplayInfo:
    """Create a display record."""
    return DisplayInfo(
        id=display_id,
        name=f"Display {display_id}",
        resolution=Resolution(width, height),
        position=Position(x, y),
        is_primary=primary,
    )


def make_window(
    window_id: str,
    title: str = "",
    bounds: tuple[int, int, int, int] = (100, 100, 800, 600),
    minimized: bool = False,
    pid: int = 4242,
    process_name: str = "editor",
) -> WindowInfo:
    """Create a window record."""
    return WindowInfo(
        id=window_id,
        title=title,
        process_name=process_name,
        pid=pid,
        bounds=RegionInfo(*bounds),
        is_minimized=minimized,
    )


class FakeRunner:
    """Command runner returning scripted output.

    Responses are keyed by a prefix of the space-joined command line; the
    longest matching key wins. Unmatched commands fail the way a missing
    executable does.
    """

    def __init__(self, responses: dict[str, Response] | None = None) -> None:
        self.responses: dict[str, Response] = dict(responses or {})
        self.calls: list[Command] = []

    def __call__(self, command: Command) -> bytes:
        self.calls.append(command)
        line = " ".join(command.args)
        matches = [key for key in self.responses if line.startswith(key)]
        if not matches:
            raise CommandError(command.program, "executable not found")

        response = self.responses[max(matches, key=len)]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(command)
        if isinstance(response, str):
            return response.encode("utf-8")
        return response

    @property
    def programs(self) -> list[str]:
        """Programs invoked, in order."""
        return [call.program for call in self.calls]


class FakeBackend(ICaptureBackend):
    """Backend with scripted enumeration and recorded capture calls."""

    name = "x11"

    def __init__(
        self,
        displays: list[DisplayInfo] | Exception | None = None,
        windows: list[WindowInfo] | Exception | None = None,
        image: bytes = b"\x89PNG fake",
        failure: Exception | None = None,
        window_images: dict[bool, bytes] | None = None,
    ) -> None:
        self.displays = displays if displays is not None else []
        self.windows = windows if windows is not None else []
        self.image = image
        self.failure = failure
        self.window_images = window_images
        self.calls: list[tuple[str, object]] = []

    def _result(self) -> bytes:
        if self.failure is not None:
            raise self.failure
        return self.image

    def capture_screen(self, display: DisplayInfo | None = None) -> bytes:
        self.calls.append(("capture_screen", display))
        return self._result()

    def capture_window(self, window: WindowInfo, include_frame: bool) -> bytes:
        self.calls.append(("capture_window", (window, include_frame)))
        if self.window_images is not None:
            return self.window_images[include_frame]
        return self._result()

    def capture_region_internal(self, region: RegionInfo) -> bytes:
        self.calls.append(("capture_region_internal", region))
        return self._result()

    def get_displays(self) -> list[DisplayInfo]:
        self.calls.append(("get_displays", None))
        if isinstance(self.displays, Exception):
            raise self.displays
        return list(self.displays)

    def get_windows(self) -> list[WindowInfo]:
        self.calls.append(("get_windows", None))
        if isinstance(self.windows, Exception):
            raise self.windows
        return list(self.windows)

    @property
    def operations(self) -> list[str]:
        """Names of the backend methods called, in order."""
        return [name for name, _ in self.calls]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from the developer's environment and settings cache."""
    for key in list(os.environ):
        if key.startswith("DESKCAPTURE_") and key != "DESKCAPTURE_DISABLE_CONSOLE_LOGGING":
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> CaptureSettings:
    """Settings with defaults, ignoring any .env file."""
    return CaptureSettings(_env_file=None)


@pytest.fixture
def single_display() -> list[DisplayInfo]:
    """One 1920x1080 display at the origin."""
    return [make_display("A", 0, 0, 1920, 1080, primary=True)]


@pytest.fixture
def dual_displays() -> list[DisplayInfo]:
    """Two side-by-side displays, the right one taller and offset."""
    return [
        make_display("left", 0, 0, 1920, 1080, primary=True),
        make_display("right", 1920, 200, 2560, 1440),
    ]
