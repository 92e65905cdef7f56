"""Tests for region validation and clipping."""

import pytest

from conftest import make_display
from deskcapture.capture_exceptions import InvalidRegionError
from deskcapture.coordinates import (
    VirtualDesktopBounds,
    clip_to_boundaries,
    is_within_bounds,
    validate_coordinates,
)
from deskcapture.models import RegionInfo


class TestValidateCoordinates:
    """Test fail-fast validation of raw requests."""

    def test_accepts_origin_and_positive_extent(self) -> None:
        """Test a well-formed request passes silently."""
        validate_coordinates(0, 0, 1, 1)

    @pytest.mark.parametrize(
        "x, y, width, height, message",
        [
            (-1, 0, 10, 10, "non-negative"),
            (0, -5, 10, 10, "non-negative"),
            (0, 0, 0, 10, "positive"),
            (0, 0, 10, -3, "positive"),
            (-1, -1, 0, 0, "non-negative"),
        ],
    )
    def test_rejects_degenerate_requests(
        self, x: int, y: int, width: int, height: int, message: str
    ) -> None:
        """Test negative origins and empty extents are rejected."""
        with pytest.raises(InvalidRegionError, match=message) as exc_info:
            validate_coordinates(x, y, width, height)

        assert exc_info.value.error_code == "INVALID_REGION"
        assert exc_info.value.context == {"x": x, "y": y, "width": width, "height": height}


class TestClipToBoundaries:
    """Test clipping against the virtual desktop."""

    def test_contained_request_is_returned_verbatim(self, single_display) -> None:
        """Test a request inside the desktop is not modified."""
        result = clip_to_boundaries(100, 200, 300, 400, single_display)

        assert (result.x, result.y, result.width, result.height) == (100, 200, 300, 400)
        assert result.was_clipped is False
        assert result.original_region == result.clipped_region

    def test_bottom_right_overflow_is_clipped(self, single_display) -> None:
        """Test the documented corner example clips to 20x20."""
        result = clip_to_boundaries(1900, 1060, 100, 100, single_display)

        assert result.clipped_region == RegionInfo(1900, 1060, 20, 20)
        assert result.was_clipped is True
        assert result.original_region == RegionInfo(1900, 1060, 100, 100)

    def test_fully_outside_request_is_rejected(self, single_display) -> None:
        """Test a request with no overlap never yields an empty capture."""
        with pytest.raises(InvalidRegionError, match="completely outside") as exc_info:
            clip_to_boundaries(2000, 2000, 50, 50, single_display)

        context = exc_info.value.context
        assert context["original_region"] == {"x": 2000, "y": 2000, "width": 50, "height": 50}
        assert context["virtual_bounds"] == {"min_x": 0, "min_y": 0, "max_x": 1920, "max_y": 1080}
        assert context["displays"] == ["A"]

    def test_touching_edge_is_outside(self, single_display) -> None:
        """Test a request starting exactly at the right edge has zero overlap."""
        with pytest.raises(InvalidRegionError):
            clip_to_boundaries(1920, 0, 10, 10, single_display)

    def test_spans_multiple_displays(self, dual_displays) -> None:
        """Test a request across both displays stays one rectangle."""
        result = clip_to_boundaries(1800, 100, 400, 200, dual_displays)

        assert result.clipped_region == RegionInfo(1800, 100, 400, 200)
        assert result.was_clipped is False

    def test_clips_to_union_not_individual_display(self, dual_displays) -> None:
        """Test the union box is used even where no display has pixels."""
        # (0, 1100) is below the left display but inside the union box
        result = clip_to_boundaries(0, 1100, 100, 1000, dual_displays)

        assert result.clipped_region == RegionInfo(0, 1100, 100, 540)
        assert result.was_clipped is True

    def test_empty_display_list_uses_fallback_box(self) -> None:
        """Test the default 1920x1080 box is used without displays."""
        result = clip_to_boundaries(1900, 0, 100, 100, [])

        assert result.clipped_region == RegionInfo(1900, 0, 20, 100)

    def test_configurable_fallback_box(self) -> None:
        """Test a custom fallback size replaces the default."""
        result = clip_to_boundaries(1900, 0, 100, 100, [], fallback=(2560, 1440))

        assert result.was_clipped is False

    def test_revalidates_before_clipping(self, single_display) -> None:
        """Test malformed input is rejected even when called directly."""
        with pytest.raises(InvalidRegionError, match="non-negative"):
            clip_to_boundaries(-10, 0, 100, 100, single_display)

    @pytest.mark.parametrize(
        "request_rect",
        [
            (0, 0, 5000, 5000),
            (10, 10, 1, 1),
            (4000, 1500, 1000, 1000),
            (1919, 1079, 2, 2),
            (500, 0, 3000, 100),
        ],
    )
    def test_result_edges_stay_inside_bounds(self, dual_displays, request_rect) -> None:
        """Test every clipped rectangle lies within the virtual desktop."""
        bounds = VirtualDesktopBounds.from_displays(dual_displays)
        result = clip_to_boundaries(*request_rect, dual_displays)

        assert bounds.min_x <= result.x < bounds.max_x
        assert bounds.min_y <= result.y < bounds.max_y
        assert result.x + result.width <= bounds.max_x
        assert result.y + result.height <= bounds.max_y
        assert result.width > 0 and result.height > 0
        # Clipping never expands a request
        assert result.width <= request_rect[2]
        assert result.height <= request_rect[3]

    def test_to_dict(self, single_display) -> None:
        """Test the result serializes for the protocol layer."""
        data = clip_to_boundaries(1900, 1060, 100, 100, single_display).to_dict()

        assert data["was_clipped"] is True
        assert data["clipped_region"] == {"x": 1900, "y": 1060, "width": 20, "height": 20}


class TestIsWithinBounds:
    """Test the containment predicate."""

    def test_contained(self, single_display) -> None:
        """Test a request fully inside is within bounds."""
        assert is_within_bounds(0, 0, 1920, 1080, single_display) is True

    def test_overflowing(self, single_display) -> None:
        """Test a request crossing the edge is not within bounds."""
        assert is_within_bounds(1900, 1060, 100, 100, single_display) is False

    def test_degenerate_does_not_raise(self, single_display) -> None:
        """Test malformed input returns False instead of raising."""
        assert is_within_bounds(0, 0, 0, 10, single_display) is False
        assert is_within_bounds(-5, 0, 10, 10, single_display) is False

    def test_empty_region_inside_display_is_not_within_bounds(self, single_display) -> None:
        """Test a zero or negative extent is rejected even at an in-bounds origin."""
        assert is_within_bounds(10, 10, 0, 0, single_display) is False
        assert is_within_bounds(10, 10, 50, -5, single_display) is False

    def test_fallback_without_displays(self) -> None:
        """Test the fallback box applies when no displays are known."""
        assert is_within_bounds(0, 0, 1920, 1080, []) is True
        assert is_within_bounds(0, 0, 1921, 1080, []) is False

    def test_offset_display(self) -> None:
        """Test bounds follow displays that do not start at the origin."""
        displays = [make_display("B", 100, 100, 800, 600)]

        assert is_within_bounds(100, 100, 800, 600, displays) is True
        assert is_within_bounds(50, 100, 100, 100, displays) is False
