"""Normalized display, window and region records.

Every backend converges on these shapes regardless of whether its raw data
came from columnar tool output, a JSON document or native API structures.
Records are immutable and produced fresh by each enumeration call.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Resolution:
    """Display resolution in pixels."""

    width: int
    height: int


@dataclass(frozen=True)
class Position:
    """Offset of a display inside the virtual desktop."""

    x: int
    y: int


@dataclass(frozen=True)
class RegionInfo:
    """Rectangle in virtual desktop coordinates.

    Used both for region requests (caller intent) and for results (what was
    actually captured after clipping).
    """

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Exclusive right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""
        return self.y + self.height

    def contains(self, other: "RegionInfo") -> bool:
        """Check whether ``other`` lies completely inside this rectangle."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def to_dict(self) -> dict[str, int]:
        """Convert to a plain dictionary."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class DisplayInfo:
    """A physical display as reported by one enumeration call.

    Attributes:
        id: Opaque backend identifier (output name, index, device name)
        name: Human-readable name
        resolution: Size in pixels
        position: Offset inside the virtual desktop
        is_primary: Whether this is the primary display
    """

    id: str
    name: str
    resolution: Resolution
    position: Position
    is_primary: bool = False

    @property
    def bounds(self) -> RegionInfo:
        """Get the display rectangle in virtual desktop coordinates."""
        return RegionInfo(
            self.position.x, self.position.y, self.resolution.width, self.resolution.height
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "resolution": {"width": self.resolution.width, "height": self.resolution.height},
            "position": {"x": self.position.x, "y": self.position.y},
            "is_primary": self.is_primary,
        }


@dataclass(frozen=True)
class WindowInfo:
    """A top-level window as reported by one enumeration call.

    Identity is only meaningful within the snapshot that produced it.

    Attributes:
        id: Opaque window handle
        title: Window title, may be empty
        process_name: Name of the owning process
        pid: Owning process id
        bounds: Window rectangle in virtual desktop coordinates
        is_minimized: Whether the window is minimized or hidden
    """

    id: str
    title: str
    process_name: str
    pid: int
    bounds: RegionInfo
    is_minimized: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "process_name": self.process_name,
            "pid": self.pid,
            "bounds": self.bounds.to_dict(),
            "is_minimized": self.is_minimized,
        }
