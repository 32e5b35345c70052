"""
Index Module
============

Spatial indexing for stash records.
"""

from stash_scanner.index.quadtree import Quadrant, QuadTree

__all__ = [
    "Quadrant",
    "QuadTree",
]
