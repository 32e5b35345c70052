"""
Save Record Models
==================

Typed views over decoded save-file tag trees.

The loader turns each NBT tag tree into plain Python values (dicts, lists,
numbers, strings). These models validate that data and give it names.
Field aliases follow the on-disk tag names, so a decoded compound can be
passed straight to `model_validate`.

Supported Records:
    - Item: A stack of one item type (`id`, `Count`/`count`)
    - ItemWithSlot: An item stored in a numbered slot
    - PlayerData: Position, dimension, inventory and ender chest of a player
    - ContainerBlockEntity: A chest, barrel, hopper... placed in the world

Format Notes:
    Pre-1.20.5 saves store `Count` as a byte and nest shulker box contents
    under `tag.BlockEntityTag.Items`. Newer saves use `count` and the
    `minecraft:container` component. Both are accepted.

Example:
    from stash_scanner.models.items import ItemWithSlot

    item = ItemWithSlot.model_validate(
        {"Slot": 0, "Count": 10, "id": "minecraft:diamond"}
    )
    assert item.count == 10
"""

from typing import Any, Dict, Iterator, List, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    model_validator,
)


OVERWORLD_DIMENSIONS = ("minecraft:overworld", 0)


class Item(BaseModel):
    """
    A stack of a single item type.

    Attributes:
        id: Namespaced item identifier (e.g., "minecraft:diamond")
        count: Number of items in the stack
        tag: Legacy item NBT data, if any
        components: Item components (1.20.5+), if any
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        ...,
        description="Namespaced item identifier",
    )

    count: int = Field(
        ...,
        validation_alias=AliasChoices("Count", "count"),
        description="Stack size",
    )

    tag: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Legacy item tag compound",
    )

    components: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Item components (1.20.5+)",
    )

    _nested: List["Item"] = PrivateAttr(default_factory=list)

    @model_validator(mode="after")
    def check_nested(self) -> "Item":
        """Validate nested contents with the item that holds them."""
        try:
            self._nested = [Item.model_validate(raw) for raw in self._raw_nested()]
        except ValidationError as e:
            raise ValueError(f"invalid item nested in {self.id}: {e}") from None
        return self

    def _raw_nested(self) -> List[Any]:
        raw_items: List[Any] = []

        if self.tag:
            block_entity = self.tag.get("BlockEntityTag")
            if isinstance(block_entity, dict):
                raw_items.extend(block_entity.get("Items") or [])

        if self.components:
            for entry in self.components.get("minecraft:container") or []:
                if isinstance(entry, dict) and entry.get("item"):
                    raw_items.append(entry["item"])

        return raw_items

    def nested_items(self) -> List["Item"]:
        """
        Items stored inside this item, e.g. the contents of a shulker box.

        Returns:
            Directly nested items (one level deep)
        """
        return list(self._nested)

    def walk(self) -> Iterator["Item"]:
        """Yield this item and everything nested inside it, recursively."""
        yield self
        for nested in self.nested_items():
            yield from nested.walk()


class ItemWithSlot(Item):
    """
    An item stored in a numbered inventory slot.

    Attributes:
        slot: Slot index within the owning inventory
    """

    slot: int = Field(
        ...,
        validation_alias=AliasChoices("Slot", "slot"),
        description="Slot index",
    )


class PlayerData(BaseModel):
    """
    The stash-relevant subset of a playerdata/<uuid>.dat file.

    Attributes:
        pos: Player position [x, y, z] in blocks
        dimension: Dimension the player is in
        inventory: Items carried by the player
        ender_items: Contents of the player's ender chest
    """

    model_config = ConfigDict(populate_by_name=True)

    pos: List[float] = Field(
        ...,
        validation_alias=AliasChoices("Pos", "pos"),
        min_length=3,
        max_length=3,
        description="Position [x, y, z] in blocks",
    )

    dimension: Union[str, int] = Field(
        default="minecraft:overworld",
        validation_alias=AliasChoices("Dimension", "dimension"),
        description="Dimension identifier (int in legacy saves)",
    )

    inventory: List[ItemWithSlot] = Field(
        default_factory=list,
        validation_alias=AliasChoices("Inventory", "inventory"),
        description="Player inventory",
    )

    ender_items: List[ItemWithSlot] = Field(
        default_factory=list,
        validation_alias=AliasChoices("EnderItems", "ender_items"),
        description="Ender chest contents",
    )

    @property
    def in_overworld(self) -> bool:
        return self.dimension in OVERWORLD_DIMENSIONS


class ContainerBlockEntity(BaseModel):
    """
    A block entity that stores items.

    Attributes:
        id: Block entity type (e.g., "minecraft:chest")
        x: Block X coordinate
        y: Block Y coordinate
        z: Block Z coordinate
        items: Items held by the container
        custom_name: Name given with an anvil, if any
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Block entity type")
    x: int = Field(..., description="Block X coordinate")
    y: int = Field(..., description="Block Y coordinate")
    z: int = Field(..., description="Block Z coordinate")

    items: List[ItemWithSlot] = Field(
        default_factory=list,
        validation_alias=AliasChoices("Items", "items"),
        description="Container contents",
    )

    custom_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CustomName", "custom_name"),
        description="Custom display name",
    )
