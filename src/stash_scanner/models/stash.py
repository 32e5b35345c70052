"""
Stash Models
============

Inputs of a duplicate-stash scan.

Core Concepts:
    - StashRecord: One item group held by one container, with its total count
    - Area: The chunk rectangle being scanned
    - DetectionMode: How clusters are judged (Absolute or GrowthRate)

Coordinate Convention:
    Areas and footprints are in chunk coordinates. Area corners are
    inclusive, so "0,0;3,3" covers a 4x4 block of chunks.

Example:
    from stash_scanner.models.stash import Area

    area = Area.parse("-10,-10;10,10")
    print(area.to_bounds())   # Bounds(-10, -10, 21, 21)
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from pydantic import BaseModel, Field

from stash_scanner.models.bounds import Bounds


AREA_FORMAT_ERROR = (
    "Can not parse provided area. Area must be given as followed: "
    "\"<x1>,<z1>;<x2>,<z2>\". Make sure that you have no spaces and all "
    "numbers are valid integers."
)


class StashSource(str, Enum):
    """Kind of container a stash record was read from."""

    PLAYER_INVENTORY = "player_inventory"
    ENDER_CHEST = "ender_chest"
    BLOCK_ENTITY = "block_entity"


@dataclass(frozen=True, slots=True)
class StashRecord:
    """
    Total count of one item group inside one container.

    Produced by StashProjector, stored by reference in the QuadTree.

    Attributes:
        group_key: Item group the count belongs to
        count: Total number of items of that group in the container
        position: Container block position (x, y, z)
        footprint: Chunk cell occupied by the container
        source: Kind of container
        owner: Player UUID or block entity type
    """

    group_key: str
    count: int
    position: Tuple[int, int, int]
    footprint: Bounds
    source: StashSource
    owner: str

    def bounds(self) -> Bounds:
        return self.footprint


class Area(BaseModel):
    """
    Rectangle of chunks to scan, given by two corners.

    Attributes:
        x1: X value of first corner
        z1: Z value of first corner
        x2: X value of second corner
        z2: Z value of second corner
    """

    x1: int = Field(..., description="X value of first corner")
    z1: int = Field(..., description="Z value of first corner")
    x2: int = Field(..., description="X value of second corner")
    z2: int = Field(..., description="Z value of second corner")

    @classmethod
    def parse(cls, value: str) -> "Area":
        """
        Parse "<x1>,<z1>;<x2>,<z2>".

        Raises:
            ValueError: If the text does not match the format
        """
        first, sep, second = value.partition(";")
        if not sep or any(c.isspace() for c in value):
            raise ValueError(AREA_FORMAT_ERROR)

        try:
            x1, z1 = _parse_point(first)
            x2, z2 = _parse_point(second)
        except ValueError:
            raise ValueError(AREA_FORMAT_ERROR) from None

        return cls(x1=x1, z1=z1, x2=x2, z2=z2)

    @classmethod
    def covering(cls, footprints: Iterable[Bounds]) -> Optional["Area"]:
        """Smallest area holding every footprint, or None if there are none."""
        footprints = list(footprints)
        if not footprints:
            return None
        return cls(
            x1=int(min(b.x for b in footprints)),
            z1=int(min(b.y for b in footprints)),
            x2=int(max(b.right for b in footprints)) - 1,
            z2=int(max(b.bottom for b in footprints)) - 1,
        )

    def to_bounds(self) -> Bounds:
        """Chunk rectangle covered by the area, corners inclusive."""
        return Bounds(
            x=min(self.x1, self.x2),
            y=min(self.z1, self.z2),
            width=abs(self.x2 - self.x1) + 1,
            height=abs(self.z2 - self.z1) + 1,
        )

    def __str__(self) -> str:
        return f"{self.x1},{self.z1};{self.x2},{self.z2}"


def _parse_point(value: str) -> Tuple[int, int]:
    x, sep, z = value.partition(",")
    if not sep:
        raise ValueError(f"Missing ',' in point: {value!r}")
    return int(x), int(z)


@dataclass(frozen=True)
class AbsoluteMode:
    """Warn for every item group whose clustered total exceeds a threshold."""

    threshold: int


@dataclass(frozen=True)
class GrowthRateMode:
    """Warn when an item group grows faster than a threshold between scans."""

    file_location: Optional[Path] = None


DetectionMode = Union[AbsoluteMode, GrowthRateMode]
