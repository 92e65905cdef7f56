"""Region validation and clipping.

Validation and clipping are separate steps: obviously malformed requests
(negative origin, empty extent) are rejected before the engine pays for a
display enumeration, and only well-formed requests are clipped against the
virtual desktop.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..capture_exceptions import InvalidRegionError
from ..models import DisplayInfo, RegionInfo
from .virtual_desktop import VirtualDesktopBounds


@dataclass(frozen=True)
class ValidatedRegion:
    """Result of clipping a region request.

    Attributes:
        x: Clipped X coordinate
        y: Clipped Y coordinate
        width: Clipped width, always positive
        height: Clipped height, always positive
        was_clipped: True if any edge differs from the request
        original_region: The request as given
        clipped_region: The rectangle that will actually be captured
    """

    x: int
    y: int
    width: int
    height: int
    was_clipped: bool
    original_region: RegionInfo
    clipped_region: RegionInfo

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "was_clipped": self.was_clipped,
            "original_region": self.original_region.to_dict(),
            "clipped_region": self.clipped_region.to_dict(),
        }


def validate_coordinates(x: int, y: int, width: int, height: int) -> None:
    """Reject malformed region requests.

    Args:
        x: Requested X coordinate
        y: Requested Y coordinate
        width: Requested width
        height: Requested height

    Raises:
        InvalidRegionError: If the origin is negative or the extent is not positive
    """
    details = {"x": x, "y": y, "width": width, "height": height}

    if x < 0 or y < 0:
        raise InvalidRegionError("Region coordinates must be non-negative", context=details)

    if width <= 0 or height <= 0:
        raise InvalidRegionError("Region dimensions must be positive", context=details)


def clip_to_boundaries(
    x: int,
    y: int,
    width: int,
    height: int,
    displays: Sequence[DisplayInfo],
    fallback: tuple[int, int] | None = None,
) -> ValidatedRegion:
    """Clip a region request to the virtual desktop.

    Args:
        x: Requested X coordinate
        y: Requested Y coordinate
        width: Requested width
        height: Requested height
        displays: Displays from a fresh enumeration
        fallback: (width, height) of the bounds used when ``displays`` is empty

    Returns:
        ValidatedRegion holding the clipped rectangle

    Raises:
        InvalidRegionError: If the request is malformed or does not overlap
            the virtual desktop at all
    """
    validate_coordinates(x, y, width, height)

    bounds = VirtualDesktopBounds.from_displays(displays, fallback)

    clipped_x = max(bounds.min_x, x)
    clipped_y = max(bounds.min_y, y)
    clipped_right = min(bounds.max_x, x + width)
    clipped_bottom = min(bounds.max_y, y + height)
    clipped_width = max(0, clipped_right - clipped_x)
    clipped_height = max(0, clipped_bottom - clipped_y)

    original = RegionInfo(x, y, width, height)

    if clipped_width == 0 or clipped_height == 0:
        raise InvalidRegionError(
            "Region is completely outside display boundaries",
            context={
                "original_region": original.to_dict(),
                "virtual_bounds": bounds.to_dict(),
                "displays": [d.id for d in displays],
            },
        )

    clipped = RegionInfo(clipped_x, clipped_y, clipped_width, clipped_height)

    return ValidatedRegion(
        x=clipped_x,
        y=clipped_y,
        width=clipped_width,
        height=clipped_height,
        was_clipped=clipped != original,
        original_region=original,
        clipped_region=clipped,
    )


def is_within_bounds(
    x: int,
    y: int,
    width: int,
    height: int,
    displays: Sequence[DisplayInfo],
    fallback: tuple[int, int] | None = None,
) -> bool:
    """Check whether a region lies entirely inside the virtual desktop.

    Never raises; malformed requests simply are not within bounds.
    """
    if width <= 0 or height <= 0:
        return False

    bounds = VirtualDesktopBounds.from_displays(displays, fallback)
    return bounds.as_region().contains(RegionInfo(x, y, width, height))
