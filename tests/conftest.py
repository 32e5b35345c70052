"""
Test Configuration
==================

Pytest fixtures and test configuration for the stash scanner.
"""

import pytest


class Rect:
    """Minimal Bounded element, compared by identity."""

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    def bounds(self):
        from stash_scanner.models.bounds import Bounds

        return Bounds(self.x, self.y, self.width, self.height)

    def __repr__(self):
        return f"Rect({self.x}, {self.y}, {self.width}, {self.height})"


@pytest.fixture
def rect():
    """Factory for Rect elements."""
    return Rect


@pytest.fixture
def new_test_quadtree():
    """Factory for a 16x16 quadtree rooted at the origin."""
    from stash_scanner.index import QuadTree
    from stash_scanner.models.bounds import Bounds

    def _make(**kwargs):
        return QuadTree(Bounds(0.0, 0.0, 16.0, 16.0), **kwargs)

    return _make


@pytest.fixture
def make_record():
    """Factory for StashRecords placed on a chunk cell."""
    from stash_scanner.models.bounds import Bounds
    from stash_scanner.models.stash import StashRecord, StashSource

    def _make(count, chunk_x, chunk_z, group_key="minecraft:diamond"):
        return StashRecord(
            group_key=group_key,
            count=count,
            position=(chunk_x * 16, 64, chunk_z * 16),
            footprint=Bounds(chunk_x, chunk_z, 1, 1),
            source=StashSource.BLOCK_ENTITY,
            owner="minecraft:chest",
        )

    return _make


@pytest.fixture
def sample_player_data():
    """Provide a decoded player.dat compound."""
    return {
        "Pos": [40.5, 64.0, -17.25],
        "Dimension": "minecraft:overworld",
        "Inventory": [
            {"Slot": 0, "id": "minecraft:diamond", "Count": 64},
            {"Slot": 1, "id": "minecraft:diamond", "Count": 32},
            {"Slot": 2, "id": "minecraft:torch", "Count": 16},
        ],
        "EnderItems": [
            {"Slot": 0, "id": "minecraft:diamond_block", "Count": 10},
        ],
        "XpLevel": 30,
    }


@pytest.fixture
def sample_chest():
    """Provide a decoded chest block entity holding a shulker box."""
    return {
        "id": "minecraft:chest",
        "x": 100,
        "y": 70,
        "z": -33,
        "Items": [
            {"Slot": 0, "id": "minecraft:iron_ingot", "Count": 64},
            {
                "Slot": 1,
                "id": "minecraft:shulker_box",
                "Count": 1,
                "tag": {
                    "BlockEntityTag": {
                        "Items": [
                            {"Slot": 0, "id": "minecraft:iron_ingot", "Count": 64},
                            {"Slot": 1, "id": "minecraft:diamond", "Count": 5},
                        ]
                    }
                },
            },
        ],
    }


@pytest.fixture
def write_player_file():
    """Factory writing a gzipped player.dat with the NBT library."""
    from nbt.nbt import (
        NBTFile,
        TAG_Byte,
        TAG_Compound,
        TAG_Double,
        TAG_List,
        TAG_String,
    )

    def _write(path, pos, items, dimension="minecraft:overworld"):
        nbtfile = NBTFile()
        nbtfile.name = ""

        pos_tag = TAG_List(name="Pos", type=TAG_Double)
        pos_tag.tags.extend(TAG_Double(value) for value in pos)
        nbtfile.tags.append(pos_tag)
        nbtfile.tags.append(TAG_String(name="Dimension", value=dimension))

        inventory = TAG_List(name="Inventory", type=TAG_Compound)
        for slot, (item_id, count) in enumerate(items):
            item = TAG_Compound()
            item.tags.append(TAG_Byte(name="Slot", value=slot))
            item.tags.append(TAG_String(name="id", value=item_id))
            item.tags.append(TAG_Byte(name="Count", value=count))
            inventory.tags.append(item)
        nbtfile.tags.append(inventory)

        path.parent.mkdir(parents=True, exist_ok=True)
        nbtfile.write_file(filename=str(path))

    return _write
