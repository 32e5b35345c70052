"""
Detection Module
================

Duplicate stash detection.

This module turns typed save records into indexed stash records and
flags clusters whose combined item counts exceed a threshold.
"""

from stash_scanner.detection.detector import DuplicateStashDetector
from stash_scanner.detection.groups import ItemGroupResolver
from stash_scanner.detection.projection import StashProjector, chunk_footprint

__all__ = [
    "DuplicateStashDetector",
    "ItemGroupResolver",
    "StashProjector",
    "chunk_footprint",
]
