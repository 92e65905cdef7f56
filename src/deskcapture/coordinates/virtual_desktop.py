"""Virtual desktop bounds.

The virtual desktop is the bounding box spanning every positioned display.
Region requests are expressed in this single coordinate space no matter how
many physical displays compose it.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..models import DisplayInfo, RegionInfo

DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080


@dataclass(frozen=True)
class VirtualDesktopBounds:
    """Union rectangle of all display rectangles.

    Example:
        Display layout:
            Left: x=0, y=0, 1920x1080
            Right: x=1920, y=200, 2560x1440

        Virtual desktop:
            min_x = 0, min_y = 0
            max_x = 4480, max_y = 1640

    Attributes:
        min_x: Left edge (inclusive)
        min_y: Top edge (inclusive)
        max_x: Right edge (exclusive)
        max_y: Bottom edge (exclusive)
    """

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @classmethod
    def from_displays(
        cls,
        displays: Sequence[DisplayInfo],
        fallback: tuple[int, int] | None = None,
    ) -> "VirtualDesktopBounds":
        """Compute the bounds of a display list.

        Args:
            displays: Displays from one enumeration call
            fallback: (width, height) of the box anchored at the origin used
                when ``displays`` is empty, 1920x1080 if not given

        Returns:
            VirtualDesktopBounds covering every display
        """
        if not displays:
            width, height = fallback or (DEFAULT_WIDTH, DEFAULT_HEIGHT)
            return cls(min_x=0, min_y=0, max_x=width, max_y=height)

        return cls(
            min_x=min(d.position.x for d in displays),
            min_y=min(d.position.y for d in displays),
            max_x=max(d.position.x + d.resolution.width for d in displays),
            max_y=max(d.position.y + d.resolution.height for d in displays),
        )

    @property
    def width(self) -> int:
        """Total width in pixels."""
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        """Total height in pixels."""
        return self.max_y - self.min_y

    def as_region(self) -> RegionInfo:
        """Get the bounds as a rectangle."""
        return RegionInfo(self.min_x, self.min_y, self.width, self.height)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
        }
