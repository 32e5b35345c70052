"""
Item Groups
===========

Maps item ids to the group key they are counted under.

Resolution Order:
    1. Ids matching an `ignore_items` pattern are not counted at all
    2. The first configured group with a matching pattern wins
    3. Anything else is its own group, keyed by the item id

Patterns are shell-style globs matched case-sensitively
(`minecraft:*_ore`, `minecraft:diamond*`).
"""

import logging
from fnmatch import fnmatchcase
from typing import Dict, Optional, Sequence

from stash_scanner.config import ItemGroupConfig, SearchDupeStashesConfig


logger = logging.getLogger(__name__)


class ItemGroupResolver:
    """
    Resolves item ids to group keys and group keys to thresholds.

    Attributes:
        groups: Configured item groups, in priority order
        ignore_items: Patterns of item ids that are never counted
        default_threshold: Threshold for groups without an override
    """

    def __init__(
        self,
        groups: Sequence[ItemGroupConfig] = (),
        ignore_items: Sequence[str] = (),
        default_threshold: int = 1000,
    ) -> None:
        self.groups = list(groups)
        self.ignore_items = list(ignore_items)
        self.default_threshold = default_threshold

        self._thresholds: Dict[str, int] = {
            group.name: group.threshold
            for group in self.groups
            if group.threshold is not None
        }
        self._cache: Dict[str, Optional[str]] = {}

    @classmethod
    def from_config(cls, config: SearchDupeStashesConfig) -> "ItemGroupResolver":
        return cls(
            groups=config.groups,
            ignore_items=config.ignore_items,
            default_threshold=config.threshold,
        )

    def group_of(self, item_id: str) -> Optional[str]:
        """
        Group key for an item id.

        Returns:
            The group key, or None if the item is ignored
        """
        if item_id in self._cache:
            return self._cache[item_id]

        group_key: Optional[str] = item_id
        if any(fnmatchcase(item_id, pattern) for pattern in self.ignore_items):
            logger.debug(f"Ignoring item id: {item_id}")
            group_key = None
        else:
            for group in self.groups:
                if any(fnmatchcase(item_id, pattern) for pattern in group.items):
                    group_key = group.name
                    break

        self._cache[item_id] = group_key
        return group_key

    def threshold_for(self, group_key: str, default: Optional[int] = None) -> int:
        """
        Threshold a cluster of this group must exceed to be flagged.

        Args:
            group_key: Group to look up
            default: Used instead of default_threshold for groups without an override
        """
        if default is None:
            default = self.default_threshold
        return self._thresholds.get(group_key, default)
