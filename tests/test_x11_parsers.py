"""Tests for xrandr and wmctrl output parsing."""

from deskcapture.models import RegionInfo
from deskcapture.parsers.x11 import parse_wmctrl, parse_xrandr

XRANDR_OUTPUT = """\
Screen 0: minimum 320 x 200, current 4480 x 1440, maximum 16384 x 16384
eDP-1 connected 1920x1080+0+360 (normal left inverted right x axis y axis) 344mm x 194mm
   1920x1080     60.02*+  59.93
   1680x1050     59.88
HDMI-1 connected primary 2560x1440+1920+0 (normal left inverted right x axis y axis) 597mm x 336mm
   2560x1440     59.95*+
DP-1 disconnected (normal left inverted right x axis y axis)
DP-2 connected (normal left inverted right x axis y axis)
   1920x1080     60.00 +
"""

WMCTRL_OUTPUT = """\
0x03a00007  0 2345   10   52   1280 720  workstation Terminal - bash
0x04000003  1 6789   0    0    1920 1080 workstation Mozilla Firefox
0x01e00001 -1 1111   0    0    1920 32   workstation
0x05000002  0 0      5    5    300  200  workstation Orphan window
malformed line
"""


class TestParseXrandr:
    """Test connected output detection."""

    def test_connected_outputs_with_modes(self) -> None:
        """Test only connected outputs with geometry are reported."""
        displays = parse_xrandr(XRANDR_OUTPUT)

        assert [d.id for d in displays] == ["eDP-1", "HDMI-1"]

    def test_geometry_and_primary(self) -> None:
        """Test resolution, position and the primary keyword."""
        laptop, external = parse_xrandr(XRANDR_OUTPUT)

        assert (laptop.resolution.width, laptop.resolution.height) == (1920, 1080)
        assert (laptop.position.x, laptop.position.y) == (0, 360)
        assert laptop.is_primary is False
        assert external.is_primary is True
        assert (external.position.x, external.position.y) == (1920, 0)

    def test_no_primary_keyword(self) -> None:
        """Test outputs without the keyword are all non-primary before normalization."""
        displays = parse_xrandr("VGA-1 connected 1024x768+0+0 (normal) 0mm x 0mm\n")

        assert len(displays) == 1
        assert displays[0].is_primary is False

    def test_empty_output(self) -> None:
        """Test no output lines yield no displays."""
        assert parse_xrandr("") == []


class TestParseWmctrl:
    """Test wmctrl -lGp column parsing."""

    def test_skips_short_lines(self) -> None:
        """Test lines with fewer than eight columns are skipped."""
        windows = parse_wmctrl(WMCTRL_OUTPUT)

        assert [w.id for w in windows] == ["0x03a00007", "0x04000003", "0x01e00001", "0x05000002"]

    def test_fields(self) -> None:
        """Test id, pid, geometry and multi-word titles."""
        terminal = parse_wmctrl(WMCTRL_OUTPUT)[0]

        assert terminal.title == "Terminal - bash"
        assert terminal.pid == 2345
        assert terminal.bounds == RegionInfo(10, 52, 1280, 720)
        assert terminal.is_minimized is False

    def test_empty_title(self) -> None:
        """Test a window without a title keeps an empty title."""
        panel = parse_wmctrl(WMCTRL_OUTPUT)[2]

        assert panel.title == ""

    def test_process_name_lookup(self) -> None:
        """Test process names come from the lookup callable."""
        names = {2345: "bash", 6789: "firefox"}
        windows = parse_wmctrl(WMCTRL_OUTPUT, process_name=names.get)

        assert [w.process_name for w in windows] == ["bash", "firefox", "unknown", "unknown"]

    def test_non_positive_pid_is_not_looked_up(self) -> None:
        """Test pid 0 never reaches the lookup."""
        looked_up: list[int] = []

        def lookup(pid: int) -> str:
            looked_up.append(pid)
            return "proc"

        parse_wmctrl(WMCTRL_OUTPUT, process_name=lookup)

        assert 0 not in looked_up
