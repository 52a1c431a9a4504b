"""Tests for widgetforge.yaml loading."""

import tempfile
from pathlib import Path

import pytest

from widgetforge.config import CONFIG_FILENAME, ProjectConfig, config_from_dict, load_config
from widgetforge.errors import ConfigError


def test_missing_file_gives_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = load_config(Path(tmpdir))
    assert config == ProjectConfig()
    assert config.component_prefixes == ["Brik"]
    assert config.activity_markers == ["@brik-activity"]


def test_load_yaml():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / CONFIG_FILENAME).write_text(
            "out_dir: build/ir\n"
            "entries:\n"
            "  - src/Weather.tsx\n"
            "as_widget: true\n"
            "component_prefixes: [Wf]\n"
            "ios_dir: apps/ios\n"
            "android_package: dev.acme.widgets\n"
        )
        config = load_config(Path(tmpdir))

    assert config.out_dir == "build/ir"
    assert config.entries == ["src/Weather.tsx"]
    assert config.as_widget is True
    assert config.component_prefixes == ["Wf"]
    assert config.ios_dir == "apps/ios"
    assert config.android_dir == "android"
    assert config.android_package == "dev.acme.widgets"
    assert ProjectConfig().android_package == "com.example.app"


def test_empty_file_gives_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / CONFIG_FILENAME).write_text("")
        assert load_config(Path(tmpdir)) == ProjectConfig()


def test_invalid_yaml():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / CONFIG_FILENAME).write_text("entries: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(Path(tmpdir))


def test_unknown_keys_are_ignored():
    config = config_from_dict({"out_dir": "ir", "theme": "dark"})
    assert config.out_dir == "ir"


def test_null_entries_means_scan():
    assert config_from_dict({"entries": None}).entries is None


def test_wrong_types_are_rejected():
    with pytest.raises(ConfigError, match="'entries' must be a list, got str"):
        config_from_dict({"entries": "src/App.tsx"})
    with pytest.raises(ConfigError, match="must be a list of strings"):
        config_from_dict({"skip_dirs": ["ok", 3]})
    with pytest.raises(ConfigError, match="must be a bool"):
        config_from_dict({"as_widget": "yes"})


def test_top_level_must_be_mapping():
    with pytest.raises(ConfigError):
        config_from_dict(["out_dir"])
