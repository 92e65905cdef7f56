"""Tests for the Wayland backend command lines."""

import json

import pytest

from conftest import FakeRunner, make_display, make_png, make_window
from deskcapture.backends.wayland import WaylandBackend
from deskcapture.capture_exceptions import CommandError, WindowNotFoundError
from deskcapture.models import RegionInfo

TREE = {
    "id": 1,
    "type": "root",
    "nodes": [
        {
            "id": 4,
            "type": "workspace",
            "name": "1",
            "nodes": [
                {
                    "id": 42,
                    "type": "con",
                    "name": "Terminal",
                    "pid": 500,
                    "app_id": "foot",
                    "rect": {"x": 100, "y": 50, "width": 804, "height": 630},
                    "window_rect": {"x": 2, "y": 28, "width": 800, "height": 600},
                }
            ],
        }
    ],
}

OUTPUTS = [
    {
        "name": "eDP-1",
        "make": "Sharp",
        "model": "LQ134",
        "active": True,
        "focused": True,
        "rect": {"x": 0, "y": 0, "width": 1920, "height": 1200},
    }
]


@pytest.fixture
def png() -> bytes:
    return make_png(4, 4)


class TestCapture:
    """Test grim invocations."""

    def test_full_screen(self, settings, png) -> None:
        """Test all outputs are grabbed by default."""
        runner = FakeRunner({"grim": png})

        WaylandBackend(settings, runner).capture_screen()

        assert runner.calls[0].args == ("grim", "-")

    def test_one_output(self, settings, png) -> None:
        """Test a display is selected by output name."""
        runner = FakeRunner({"grim": png})

        WaylandBackend(settings, runner).capture_screen(make_display("HDMI-A-1"))

        assert runner.calls[0].args == ("grim", "-o", "HDMI-A-1", "-")

    def test_region(self, settings, png) -> None:
        """Test the region becomes a grim geometry."""
        runner = FakeRunner({"grim": png})

        WaylandBackend(settings, runner).capture_region_internal(RegionInfo(10, 20, 300, 200))

        assert runner.calls[0].args == ("grim", "-g", "10,20 300x200", "-")

    def test_window_with_frame(self, settings, png) -> None:
        """Test the container rectangle is grabbed with the frame."""
        runner = FakeRunner({"swaymsg -t get_tree": json.dumps(TREE), "grim": png})

        WaylandBackend(settings, runner).capture_window(make_window("42"), include_frame=True)

        assert runner.calls[-1].args == ("grim", "-g", "100,50 804x630", "-")

    def test_window_content_only(self, settings, png) -> None:
        """Test the client area is offset by the container origin."""
        runner = FakeRunner({"swaymsg -t get_tree": json.dumps(TREE), "grim": png})

        WaylandBackend(settings, runner).capture_window(make_window("42"), include_frame=False)

        assert runner.calls[-1].args == ("grim", "-g", "102,78 800x600", "-")

    def test_window_gone(self, settings, png) -> None:
        """Test a window missing from the fresh tree is not found."""
        runner = FakeRunner({"swaymsg -t get_tree": json.dumps(TREE), "grim": png})

        with pytest.raises(WindowNotFoundError):
            WaylandBackend(settings, runner).capture_window(make_window("99"), include_frame=False)

        assert runner.programs == ["swaymsg"]


class TestEnumeration:
    """Test output and window enumeration."""

    def test_displays_from_wlr_randr(self, settings) -> None:
        """Test wlr-randr is tried first."""
        output = '''eDP-1 "Sharp"\n  Enabled: yes\n  Modes:\n    1920x1200 px, 60.0 Hz (current)\n  Position: 0,0\n'''
        runner = FakeRunner({"wlr-randr": output})

        (display,) = WaylandBackend(settings, runner).get_displays()

        assert display.id == "eDP-1"
        assert runner.programs == ["wlr-randr"]

    def test_displays_fall_back_to_sway(self, settings) -> None:
        """Test sway IPC is used when wlr-randr is unavailable."""
        runner = FakeRunner({"swaymsg -t get_outputs": json.dumps(OUTPUTS)})

        (display,) = WaylandBackend(settings, runner).get_displays()

        assert display.name == "Sharp LQ134"
        assert display.is_primary is True
        assert runner.programs == ["wlr-randr", "swaymsg"]

    def test_displays_fail_without_any_tool(self, settings) -> None:
        """Test the error propagates when neither tool is available."""
        with pytest.raises(CommandError):
            WaylandBackend(settings, FakeRunner()).get_displays()

    def test_windows(self, settings) -> None:
        """Test windows come from the sway tree."""
        runner = FakeRunner({"swaymsg -t get_tree": json.dumps(TREE)})

        (window,) = WaylandBackend(settings, runner).get_windows()

        assert window.id == "42"
        assert window.process_name == "foot"
        assert window.bounds == RegionInfo(100, 50, 804, 630)
