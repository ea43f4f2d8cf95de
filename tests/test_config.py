"""
Tests for the hierarchical user config and SorterConfig validation.
"""

import json

import pytest

pytestmark = pytest.mark.fast

from phpsorter.exceptions import ConfigError
from phpsorter.paths import get_paths
from phpsorter.schemas import SorterConfig
from phpsorter.user_config import DEFAULT_CONFIG, UserConfig, load_sorter_config


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestSorterConfig:

    def test_defaults(self):
        config = SorterConfig()
        assert config.sort_properties and config.sort_traits
        assert config.sort_namespace_uses and config.sort_constants
        assert config.remove_unused_imports
        assert config.add_newline_between_const_and_properties
        assert config.add_visibility_spacing
        assert config.default_visibility == "public"

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            SorterConfig(sort_everything=True)


class TestUserConfig:

    def test_defaults_without_files(self, isolated_config):
        config = UserConfig(isolated_config)
        assert config.get("sorter.sort_traits") is True
        assert config.get("files.extensions") == [".php"]
        assert config.get("missing.key", "fallback") == "fallback"

    def test_local_overrides_global(self, isolated_config):
        paths = get_paths(isolated_config)
        write_json(paths.global_config, {"sorter": {"default_visibility": "protected", "sort_traits": False}})
        write_json(paths.local_config, {"sorter": {"default_visibility": "private"}})

        config = UserConfig(isolated_config)
        assert config.get("sorter.default_visibility") == "private"
        assert config.get("sorter.sort_traits") is False
        assert config.get("sorter.sort_constants") is True

    def test_broken_file_ignored(self, isolated_config):
        local = get_paths(isolated_config).local_config
        local.parent.mkdir(parents=True)
        local.write_text("{not json")

        assert UserConfig(isolated_config).get_all() == DEFAULT_CONFIG

    def test_set_local_persists(self, isolated_config):
        config = UserConfig(isolated_config)
        assert config.set_local("sorter.sort_properties", False)

        saved = json.loads(get_paths(isolated_config).local_config.read_text())
        assert saved == {"sorter": {"sort_properties": False}}
        assert config.get("sorter.sort_properties") is False

    def test_set_global_persists_under_home(self, isolated_config):
        config = UserConfig(isolated_config)
        assert config.set_global("files.backup", True)

        saved = json.loads(get_paths(isolated_config).global_config.read_text())
        assert saved == {"files": {"backup": True}}
        assert config.get("files.backup") is True

    def test_get_all_is_a_copy(self, isolated_config):
        config = UserConfig(isolated_config)
        config.get_all()["sorter"]["sort_traits"] = False
        assert config.get("sorter.sort_traits") is True


class TestLoadSorterConfig:

    def test_overrides_win(self, isolated_config):
        write_json(get_paths(isolated_config).local_config, {"sorter": {"default_visibility": "private"}})

        config = load_sorter_config(isolated_config, {"default_visibility": "protected"})
        assert config.default_visibility == "protected"

    def test_none_overrides_ignored(self, isolated_config):
        write_json(get_paths(isolated_config).local_config, {"sorter": {"remove_unused_imports": False}})

        config = load_sorter_config(isolated_config, {"remove_unused_imports": None})
        assert config.remove_unused_imports is False

    def test_invalid_visibility(self, isolated_config):
        with pytest.raises(ConfigError) as exc_info:
            load_sorter_config(isolated_config, {"default_visibility": "internal"})
        assert "Invalid sorter configuration" in str(exc_info.value)
