"""
Data Models
===========

Models for the stash scanner.

Models:
    Bounds:
        - Bounds: Axis-aligned rectangle in chunk coordinates
        - Bounded: Protocol for anything that can be indexed

    Save records:
        - Item, ItemWithSlot: Item stacks
        - PlayerData: Player inventory and ender chest
        - ContainerBlockEntity: Placed containers

    Stash:
        - StashRecord: Item group total for one container
        - Area: Chunk rectangle to scan
        - AbsoluteMode, GrowthRateMode: Detection modes

    Output:
        - MemberPosition, DupeWarning, ScanReport
"""

from stash_scanner.models.bounds import Bounded, Bounds
from stash_scanner.models.items import ContainerBlockEntity, Item, ItemWithSlot, PlayerData
from stash_scanner.models.stash import (
    AbsoluteMode,
    Area,
    DetectionMode,
    GrowthRateMode,
    StashRecord,
    StashSource,
)
from stash_scanner.models.output import DupeWarning, MemberPosition, ScanReport

__all__ = [
    # Bounds
    "Bounded",
    "Bounds",
    # Save records
    "Item",
    "ItemWithSlot",
    "PlayerData",
    "ContainerBlockEntity",
    # Stash
    "StashRecord",
    "StashSource",
    "Area",
    "AbsoluteMode",
    "GrowthRateMode",
    "DetectionMode",
    # Output
    "MemberPosition",
    "DupeWarning",
    "ScanReport",
]
