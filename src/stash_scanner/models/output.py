"""
Scan Output Models
==================

Output contract of a duplicate-stash scan.

Output Contract:
    {
        "area": "-10,-10;10,10",
        "radius": 1,
        "threshold": 1000,
        "records_scanned": 412,
        "warnings": [
            {
                "group_key": "diamonds",
                "total_count": 1792,
                "threshold": 1000,
                "member_positions": [
                    {"x": 12, "y": 64, "z": -40, "count": 1152,
                     "source": "block_entity", "owner": "minecraft:chest"},
                    {"x": 14, "y": 64, "z": -38, "count": 640,
                     "source": "player_inventory", "owner": "1b2c..."}
                ]
            }
        ]
    }

Design Rules:
    - One warning per (cluster, item group) over the threshold
    - A container may appear in several warnings
    - Identical clusters reached from different members are reported once
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from stash_scanner.models.stash import StashRecord, StashSource


class MemberPosition(BaseModel):
    """
    One container taking part in a flagged cluster.

    Attributes:
        x: Block X coordinate
        y: Block Y coordinate
        z: Block Z coordinate
        count: Items of the flagged group in this container
        source: Kind of container
        owner: Player UUID or block entity type
    """

    x: int = Field(..., description="Block X coordinate")
    y: int = Field(..., description="Block Y coordinate")
    z: int = Field(..., description="Block Z coordinate")
    count: int = Field(..., ge=0, description="Items of the group held here")
    source: StashSource = Field(..., description="Kind of container")
    owner: str = Field(..., description="Player UUID or block entity type")

    @classmethod
    def from_record(cls, record: StashRecord) -> "MemberPosition":
        x, y, z = record.position
        return cls(
            x=x,
            y=y,
            z=z,
            count=record.count,
            source=record.source,
            owner=record.owner,
        )


class DupeWarning(BaseModel):
    """
    A cluster of nearby containers whose combined count is suspicious.

    Attributes:
        group_key: Item group that exceeded the threshold
        total_count: Summed count over all members
        threshold: Threshold that was exceeded
        member_positions: Containers forming the cluster
    """

    group_key: str = Field(..., description="Item group key")
    total_count: int = Field(..., ge=0, description="Summed item count")
    threshold: int = Field(..., ge=0, description="Threshold exceeded")
    member_positions: List[MemberPosition] = Field(
        default_factory=list,
        description="Containers in the cluster",
    )

    def describe(self) -> str:
        """One-line human-readable summary."""
        places = ", ".join(
            f"({m.x}, {m.y}, {m.z})x{m.count}" for m in self.member_positions
        )
        return (
            f"{self.group_key}: {self.total_count} items > {self.threshold} "
            f"in {len(self.member_positions)} container(s): {places}"
        )


class ScanReport(BaseModel):
    """
    Complete result of one scan.

    Attributes:
        area: Scanned area, as "<x1>,<z1>;<x2>,<z2>"
        radius: Neighborhood radius in chunks
        threshold: Global threshold
        records_scanned: Stash records inserted into the index
        warnings: Flagged clusters
    """

    area: Optional[str] = Field(default=None, description="Scanned area")
    radius: int = Field(..., ge=0, description="Neighborhood radius (chunks)")
    threshold: int = Field(..., ge=0, description="Global threshold")
    records_scanned: int = Field(..., ge=0, description="Records indexed")
    warnings: List[DupeWarning] = Field(
        default_factory=list,
        description="Flagged clusters",
    )
