"""
World Save Loader
=================

Reads the parts of a Java Edition world save needed for a stash scan.

Files Read:
    - level.dat            -> world metadata (plain dict)
    - playerdata/*.dat     -> PlayerData, keyed by the UUID in the file name
    - region/*.mca         -> ContainerBlockEntity for every block entity
                              that carries an `Items` list

Binary decoding is done by the `NBT` library. Tag trees are converted to
plain Python values first, then validated by the pydantic models in
`stash_scanner.models.items`. Malformed files and records are logged and
skipped; a missing world directory is an error.

Example:
    from stash_scanner.savedata import WorldSave

    save = WorldSave("./world")
    for uuid, player in save.iter_players():
        print(uuid, player.pos)
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Tuple

from nbt.nbt import (
    NBTFile,
    TAG_Byte_Array,
    TAG_Compound,
    TAG_Int_Array,
    TAG_List,
    TAG_Long_Array,
    MalformedFileError,
)
from nbt.region import RegionFile, RegionFileFormatError
from pydantic import ValidationError

from stash_scanner.models.items import ContainerBlockEntity, PlayerData


logger = logging.getLogger(__name__)


# =============================================================================
# Tag Conversion
# =============================================================================

def tag_to_python(tag: Any) -> Any:
    """
    Convert an NBT tag tree into plain Python values.

    Compounds become dicts, lists become lists, byte arrays become bytes,
    int/long arrays become lists of ints, everything else its `.value`.
    """
    if isinstance(tag, TAG_Compound):
        return {child.name: tag_to_python(child) for child in tag.tags}
    if isinstance(tag, TAG_List):
        return [tag_to_python(child) for child in tag.tags]
    if isinstance(tag, TAG_Byte_Array):
        return bytes(tag.value)
    if isinstance(tag, (TAG_Int_Array, TAG_Long_Array)):
        return list(tag.value)
    return tag.value


def extract_block_entities(chunk: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Block entity compounds of a decoded chunk.

    Handles the 1.18+ layout (`block_entities` at the root) and the legacy
    layout (`Level.TileEntities`).
    """
    if "block_entities" in chunk:
        return chunk["block_entities"] or []
    level = chunk.get("Level") or {}
    return level.get("TileEntities") or []


def containers_from_chunk(chunk: Dict[str, Any]) -> Iterator[ContainerBlockEntity]:
    """Validated containers of a decoded chunk; invalid entries are skipped."""
    for raw in extract_block_entities(chunk):
        if "Items" not in raw:
            continue
        try:
            yield ContainerBlockEntity.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed block entity {raw.get('id', '<unknown>')} at "
                f"({raw.get('x')}, {raw.get('y')}, {raw.get('z')}): {e.error_count()} error(s)"
            )


# =============================================================================
# World Save
# =============================================================================

class WorldSave:
    """
    A world save directory.

    Attributes:
        path: Root directory of the save
    """

    def __init__(self, path: str) -> None:
        """
        Args:
            path: World save directory

        Raises:
            FileNotFoundError: If the directory does not exist
        """
        self.path = Path(path)
        if not self.path.is_dir():
            raise FileNotFoundError(f"World directory not found: {path}")

    @property
    def level_dat_path(self) -> Path:
        return self.path / "level.dat"

    @property
    def playerdata_dir(self) -> Path:
        return self.path / "playerdata"

    @property
    def region_dir(self) -> Path:
        return self.path / "region"

    def read_level_dat(self) -> Dict[str, Any]:
        """
        Decode level.dat.

        Returns:
            Contents of the `Data` compound

        Raises:
            FileNotFoundError: If level.dat is missing
            MalformedFileError: If level.dat can not be decoded
        """
        if not self.level_dat_path.exists():
            raise FileNotFoundError(f"level.dat not found: {self.level_dat_path}")

        logger.info(f"Reading {self.level_dat_path}")
        try:
            root = tag_to_python(NBTFile(filename=str(self.level_dat_path)))
        except (OSError, EOFError) as e:
            raise MalformedFileError(f"Can not decode {self.level_dat_path}: {e}") from e
        return root.get("Data", root)

    def iter_players(self) -> Iterator[Tuple[str, PlayerData]]:
        """Yield (uuid, player) for every readable player file."""
        if not self.playerdata_dir.is_dir():
            logger.warning(f"No playerdata directory in {self.path}")
            return

        for file_path in sorted(self.playerdata_dir.glob("*.dat")):
            uuid = file_path.stem
            try:
                data = tag_to_python(NBTFile(filename=str(file_path)))
            except (MalformedFileError, OSError, EOFError) as e:
                logger.warning(f"Skipping unreadable player file {file_path.name}: {e}")
                continue

            try:
                player = PlayerData.model_validate(data)
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed player {uuid}: {e.error_count()} error(s)"
                )
                continue

            logger.debug(f"Loaded player {uuid} at {player.pos}")
            yield uuid, player

    def iter_containers(self) -> Iterator[ContainerBlockEntity]:
        """Yield every container block entity in the overworld region files."""
        if not self.region_dir.is_dir():
            logger.warning(f"No region directory in {self.path}")
            return

        for file_path in sorted(self.region_dir.glob("*.mca")):
            if file_path.stat().st_size == 0:
                continue

            logger.info(f"Reading region {file_path.name}")
            try:
                region = RegionFile(filename=str(file_path))
            except (RegionFileFormatError, OSError) as e:
                logger.warning(f"Skipping unreadable region {file_path.name}: {e}")
                continue

            try:
                for chunk in region.iter_chunks():
                    yield from containers_from_chunk(tag_to_python(chunk))
            finally:
                region.close()
