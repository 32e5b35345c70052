"""
Stash Scanner
=============

Detects likely item-duplication exploits in Minecraft Java Edition saves.

Duplicated loot tends to be stashed: many containers close together whose
combined item counts are far above what normal play produces. This package
reads a world save, indexes every container in a quadtree, and flags
clusters of nearby containers whose per-group totals exceed a threshold.

Components:
    - models: Bounds, typed save records, stash records, scan output
    - index: Quadtree spatial index
    - detection: Item groups, stash projection, duplicate stash detector
    - savedata: World save loading via the NBT library
    - config: JSON/YAML settings and logging setup
    - cli: Command line entry point

Example:
    from stash_scanner.config import load_config
    from stash_scanner.detection import DuplicateStashDetector, StashProjector
    from stash_scanner.savedata import WorldSave

    settings = load_config()
    detector = DuplicateStashDetector.from_settings(settings)
    save = WorldSave("./world")
    records = StashProjector(detector.resolver).project_world(
        save.iter_players(), save.iter_containers()
    )
    report = detector.detect(records)
"""

__version__ = "0.1.0"
__author__ = "Stash Scanner Project"

__all__ = [
    "__version__",
]
