"""
Save Data Module
================

Reading world saves into typed records.
"""

from stash_scanner.savedata.loader import (
    WorldSave,
    containers_from_chunk,
    extract_block_entities,
    tag_to_python,
)

__all__ = [
    "WorldSave",
    "containers_from_chunk",
    "extract_block_entities",
    "tag_to_python",
]
