"""
Bounds Models
=============

Axis-aligned rectangles used by the spatial index.

Coordinates are in CHUNK SPACE: x follows world X, y follows world Z.
A container at block (x, z) lives in the 1x1 cell at (x // 16, z // 16).

Example:
    from stash_scanner.models.bounds import Bounds

    cell = Bounds(x=2, y=3, width=1, height=1)
    window = cell.expand(1)        # Bounds(1, 2, 3, 3)
    assert window.intersects(cell)
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Bounded(Protocol):
    """
    Capability required of anything stored in a QuadTree.

    The rectangle may be recomputed on every call; the index never caches it.
    """

    def bounds(self) -> "Bounds":
        ...


@dataclass(frozen=True, slots=True)
class Bounds:
    """
    Immutable axis-aligned rectangle.

    Attributes:
        x: Left edge
        y: Top edge
        width: Horizontal extent
        height: Vertical extent
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def bounds(self) -> "Bounds":
        """A rectangle is trivially bounded by itself."""
        return self

    def expand(self, margin: float) -> "Bounds":
        """Grow the rectangle outward by `margin` on every side."""
        return Bounds(
            x=self.x - margin,
            y=self.y - margin,
            width=self.width + 2 * margin,
            height=self.height + 2 * margin,
        )

    def intersects(self, other: "Bounds") -> bool:
        """True if the two rectangles share a region of non-zero area."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def __repr__(self) -> str:
        return f"Bounds({self.x:g}, {self.y:g}, {self.width:g}, {self.height:g})"
