"""
Configuration Tests
===================

Tests for config loading, environment overrides and area parsing.
"""

import json

import pytest

from stash_scanner.config import ConfigLoadError, Settings, load_config
from stash_scanner.models.bounds import Bounds
from stash_scanner.models.stash import Area


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run in an empty directory with no user config and no overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("STASH_SCANNER_THRESHOLD", "STASH_SCANNER_RADIUS", "STASH_SCANNER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults(self, isolated_cwd):
        settings = load_config()

        assert settings.search_dupe_stashes.threshold == 1000
        assert settings.search_dupe_stashes.radius == 1
        assert settings.search_dupe_stashes.groups == []
        assert settings.index.capacity == 4
        assert settings.index.max_depth == 10
        assert settings.logging.level == "INFO"

    def test_load_json(self, isolated_cwd):
        path = isolated_cwd / "custom.json"
        path.write_text(json.dumps({
            "search_dupe_stashes": {
                "threshold": 256,
                "groups": [{"name": "diamonds", "items": ["minecraft:diamond*"], "threshold": 64}],
            }
        }))

        settings = load_config(str(path))

        assert settings.search_dupe_stashes.threshold == 256
        assert settings.search_dupe_stashes.groups[0].name == "diamonds"
        assert settings.search_dupe_stashes.groups[0].threshold == 64

    def test_load_yaml(self, isolated_cwd):
        path = isolated_cwd / "custom.yaml"
        path.write_text(
            "search_dupe_stashes:\n"
            "  radius: 4\n"
            "  ignore_items:\n"
            "    - minecraft:*_shulker_box\n"
            "index:\n"
            "  capacity: 16\n"
        )

        settings = load_config(str(path))

        assert settings.search_dupe_stashes.radius == 4
        assert settings.search_dupe_stashes.ignore_items == ["minecraft:*_shulker_box"]
        assert settings.index.capacity == 16

    def test_search_path(self, isolated_cwd):
        (isolated_cwd / "stash-scanner.json").write_text('{"logging": {"level": "DEBUG"}}')
        assert load_config().logging.level == "DEBUG"

    def test_empty_yaml_gives_defaults(self, isolated_cwd):
        path = isolated_cwd / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == Settings()

    def test_env_overrides(self, isolated_cwd, monkeypatch):
        path = isolated_cwd / "custom.json"
        path.write_text('{"search_dupe_stashes": {"threshold": 256}}')
        monkeypatch.setenv("STASH_SCANNER_THRESHOLD", "42")
        monkeypatch.setenv("STASH_SCANNER_RADIUS", "3")
        monkeypatch.setenv("STASH_SCANNER_LOG_LEVEL", "WARNING")

        settings = load_config(str(path))

        assert settings.search_dupe_stashes.threshold == 42
        assert settings.search_dupe_stashes.radius == 3
        assert settings.logging.level == "WARNING"

    def test_missing_explicit_path(self, isolated_cwd):
        with pytest.raises(ConfigLoadError):
            load_config(str(isolated_cwd / "nope.json"))

    def test_malformed_json(self, isolated_cwd):
        path = isolated_cwd / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigLoadError):
            load_config(str(path))

    def test_invalid_values(self, isolated_cwd):
        path = isolated_cwd / "invalid.json"
        path.write_text('{"search_dupe_stashes": {"radius": -1}}')
        with pytest.raises(ConfigLoadError):
            load_config(str(path))

    def test_non_object_root(self, isolated_cwd):
        path = isolated_cwd / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigLoadError):
            load_config(str(path))


class TestArea:
    """Tests for search area parsing."""

    def test_parse(self):
        area = Area.parse("-10,5;20,-7")
        assert (area.x1, area.z1, area.x2, area.z2) == (-10, 5, 20, -7)
        assert str(area) == "-10,5;20,-7"

    @pytest.mark.parametrize("value", [
        "",
        "1,2",
        "1,2;3",
        "1;2;3;4",
        "a,2;3,4",
        "1, 2;3,4",
        "1.5,2;3,4",
    ])
    def test_parse_errors(self, value):
        with pytest.raises(ValueError, match="Can not parse provided area"):
            Area.parse(value)

    def test_to_bounds_is_inclusive(self):
        assert Area.parse("0,0;3,3").to_bounds() == Bounds(0, 0, 4, 4)

    def test_to_bounds_normalizes_corners(self):
        assert Area.parse("5,-2;-5,2").to_bounds() == Bounds(-5, -2, 11, 5)

    def test_covering(self):
        area = Area.covering([Bounds(3, 4, 1, 1), Bounds(-2, 9, 1, 1)])
        assert str(area) == "-2,4;3,9"
        assert Area.covering([]) is None
