"""
Stash Scanner Configuration
===========================

This module handles configuration loading for the stash scanner.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. JSON or YAML config file
    3. Default values (lowest priority)

Environment Variable Mapping:
    STASH_SCANNER_THRESHOLD -> search_dupe_stashes.threshold
    STASH_SCANNER_RADIUS    -> search_dupe_stashes.radius
    STASH_SCANNER_LOG_LEVEL -> logging.level

Example config.json:
    {
        "search_dupe_stashes": {
            "threshold": 1000,
            "radius": 1,
            "groups": [
                {"name": "diamonds",
                 "items": ["minecraft:diamond", "minecraft:diamond_block"],
                 "threshold": 256}
            ],
            "ignore_items": ["minecraft:*_shulker_box"]
        }
    }

Example:
    from stash_scanner.config import load_config, setup_logging

    settings = load_config("config.json")
    setup_logging(settings)
    print(settings.search_dupe_stashes.threshold)

Note:
    Settings are loaded explicitly by the CLI and passed down. Nothing is
    read at import time.
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class ItemGroupConfig(BaseModel):
    """Named set of item ids counted together."""

    name: str = Field(..., min_length=1, description="Group key used in warnings")
    items: List[str] = Field(
        ...,
        min_length=1,
        description="Item id glob patterns, e.g. 'minecraft:*_ore'",
    )
    threshold: Optional[int] = Field(
        default=None,
        ge=0,
        description="Overrides the global threshold for this group",
    )


class SearchDupeStashesConfig(BaseModel):
    """Duplicate stash search configuration."""

    threshold: int = Field(
        default=1000,
        ge=0,
        description="Items per group above which a cluster is flagged",
    )
    radius: int = Field(
        default=1,
        ge=0,
        description="Neighborhood radius in chunks",
    )
    groups: List[ItemGroupConfig] = Field(
        default_factory=list,
        description="Item groups; ungrouped items are keyed by their id",
    )
    ignore_items: List[str] = Field(
        default_factory=list,
        description="Item id glob patterns never counted",
    )


class IndexConfig(BaseModel):
    """Quadtree tuning."""

    capacity: int = Field(default=4, ge=1, description="Elements per leaf before split")
    max_depth: int = Field(default=10, ge=0, description="Maximum subdivision depth")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the stash scanner.

    Loads configuration from a JSON/YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    search_dupe_stashes: SearchDupeStashesConfig = Field(
        default_factory=SearchDupeStashesConfig
    )
    index: IndexConfig = Field(default_factory=IndexConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigLoadError(Exception):
    """Raised when a config file exists but cannot be read or validated."""


# =============================================================================
# Configuration Loading
# =============================================================================

def default_search_paths() -> List[Path]:
    """Locations probed when no config path is given."""
    return [
        Path("stash-scanner.json"),
        Path("stash-scanner.yaml"),
        Path("config.json"),
        Path("config.yaml"),
        Path.home() / ".config" / "stash-scanner" / "config.json",
    ]


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from a config file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. Config file (JSON or YAML, chosen by extension)
        3. Default values

    Args:
        config_path: Path to the config file. If None, searches common locations.

    Returns:
        Settings: Loaded configuration

    Raises:
        ConfigLoadError: If an explicit path is missing, or the file is malformed
    """
    if config_path is not None and not Path(config_path).exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if config_path is None:
        for path in default_search_paths():
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path:
        logger.info(f"Loading config from: {config_path}")
        config_data = _read_config_file(Path(config_path))
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    try:
        return Settings.model_validate(config_data)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid configuration: {e}") from e


def _read_config_file(path: Path) -> dict:
    """Parse a config file into a dict."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as e:
        raise ConfigLoadError(f"Cannot read config {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Cannot parse config {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config root must be an object: {path}")
    return data


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Search settings (pydantic coerces the strings)
    if env_threshold := os.environ.get("STASH_SCANNER_THRESHOLD"):
        config_data.setdefault("search_dupe_stashes", {})["threshold"] = env_threshold
    if env_radius := os.environ.get("STASH_SCANNER_RADIUS"):
        config_data.setdefault("search_dupe_stashes", {})["radius"] = env_radius

    # Logging settings
    if env_log := os.environ.get("STASH_SCANNER_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
