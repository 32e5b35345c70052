"""
Stash Projection
================

Turns typed save records into StashRecords the spatial index can hold.

This module:
    - Flattens container contents, including items nested in shulker boxes
    - Resolves every item id to its group key (ignored ids are dropped)
    - Sums counts per group, giving one StashRecord per (container, group)
    - Places the record on the 1x1 chunk cell holding the container

Player inventories and ender chests are both placed at the player's
position. Only overworld players are projected, since block entities are
read from the overworld region files.
"""

import logging
import math
from typing import Dict, Iterable, List, Sequence, Tuple

from stash_scanner.detection.groups import ItemGroupResolver
from stash_scanner.models.bounds import Bounds
from stash_scanner.models.items import ContainerBlockEntity, Item, PlayerData
from stash_scanner.models.stash import StashRecord, StashSource


logger = logging.getLogger(__name__)


CHUNK_SIZE = 16


def chunk_footprint(x: float, z: float) -> Bounds:
    """1x1 chunk cell holding block coordinates (x, z)."""
    return Bounds(
        x=math.floor(x) // CHUNK_SIZE,
        y=math.floor(z) // CHUNK_SIZE,
        width=1,
        height=1,
    )


class StashProjector:
    """
    Projects containers into per-group StashRecords.

    Attributes:
        resolver: Item id to group key mapping

    Example:
        projector = StashProjector(ItemGroupResolver())
        records = projector.project_world(save.iter_players(), save.iter_containers())
    """

    def __init__(self, resolver: ItemGroupResolver) -> None:
        self.resolver = resolver

    def project_items(
        self,
        items: Sequence[Item],
        position: Tuple[int, int, int],
        source: StashSource,
        owner: str,
    ) -> List[StashRecord]:
        """
        Sum item counts per group for one container.

        Args:
            items: Container contents
            position: Container block position (x, y, z)
            source: Kind of container
            owner: Player UUID or block entity type

        Returns:
            One record per group with a positive total, in first-seen order
        """
        totals: Dict[str, int] = {}
        for item in items:
            for stack in item.walk():
                group_key = self.resolver.group_of(stack.id)
                if group_key is None:
                    continue
                totals[group_key] = totals.get(group_key, 0) + stack.count

        footprint = chunk_footprint(position[0], position[2])
        return [
            StashRecord(
                group_key=group_key,
                count=count,
                position=position,
                footprint=footprint,
                source=source,
                owner=owner,
            )
            for group_key, count in totals.items()
            if count > 0
        ]

    def project_player(self, uuid: str, player: PlayerData) -> List[StashRecord]:
        """Records for a player's inventory and ender chest."""
        if not player.in_overworld:
            logger.debug(f"Skipping player {uuid} in dimension {player.dimension}")
            return []

        x, y, z = (math.floor(c) for c in player.pos)
        position = (x, y, z)
        return (
            self.project_items(player.inventory, position, StashSource.PLAYER_INVENTORY, uuid)
            + self.project_items(player.ender_items, position, StashSource.ENDER_CHEST, uuid)
        )

    def project_container(self, container: ContainerBlockEntity) -> List[StashRecord]:
        """Records for a placed container."""
        return self.project_items(
            container.items,
            (container.x, container.y, container.z),
            StashSource.BLOCK_ENTITY,
            container.id,
        )

    def project_world(
        self,
        players: Iterable[Tuple[str, PlayerData]],
        containers: Iterable[ContainerBlockEntity],
    ) -> List[StashRecord]:
        """
        Records for every player and container of a save.

        Args:
            players: (uuid, player) pairs
            containers: Placed containers

        Returns:
            All stash records, players first
        """
        records: List[StashRecord] = []
        player_count = 0
        container_count = 0

        for uuid, player in players:
            records.extend(self.project_player(uuid, player))
            player_count += 1

        for container in containers:
            records.extend(self.project_container(container))
            container_count += 1

        logger.info(
            f"Projected {len(records)} stash records from "
            f"{player_count} players and {container_count} containers"
        )
        return records
