"""Project configuration, read from ``widgetforge.yaml`` at the project root."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from widgetforge.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "widgetforge.yaml"

# Component names accepted with or without these prefixes (``BrikText`` or ``Text``).
DEFAULT_COMPONENT_PREFIXES = ("Brik",)

# Doc comment tags that mark a function as a live activity definition.
DEFAULT_ACTIVITY_MARKERS = ("@brik-activity",)

# Kotlin package holding the host app's MainActivity and R class.
DEFAULT_ANDROID_PACKAGE = "com.example.app"


@dataclass
class ProjectConfig:
    out_dir: str = ".widgetforge"
    entries: list[str] | None = None
    as_widget: bool = False
    component_prefixes: list[str] = field(default_factory=lambda: list(DEFAULT_COMPONENT_PREFIXES))
    activity_markers: list[str] = field(default_factory=lambda: list(DEFAULT_ACTIVITY_MARKERS))
    skip_dirs: list[str] = field(default_factory=list)
    ios_dir: str = "ios"
    android_dir: str = "android"
    android_package: str = DEFAULT_ANDROID_PACKAGE


# Expected type per key; list entries are always strings.
_FIELD_TYPES = {
    "out_dir": str,
    "entries": list,
    "as_widget": bool,
    "component_prefixes": list,
    "activity_markers": list,
    "skip_dirs": list,
    "ios_dir": str,
    "android_dir": str,
    "android_package": str,
}


def load_config(project_root: Path) -> ProjectConfig:
    """Load ``widgetforge.yaml`` from ``project_root``.

    A missing file yields the defaults. Unknown keys are ignored with a
    warning.

    Raises:
        ConfigError: if the file is not valid YAML or a key has the wrong type.
    """
    path = Path(project_root) / CONFIG_FILENAME
    if not path.exists():
        return ProjectConfig()

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config: {e}", file_path=str(path)) from e

    if data is None:
        return ProjectConfig()
    return config_from_dict(data, file_path=str(path))


def config_from_dict(data: dict, file_path: str = "") -> ProjectConfig:
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping", file_path=file_path)

    known = {f.name for f in fields(ProjectConfig)}
    values = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        if value is None and key == "entries":
            continue
        expected = _FIELD_TYPES[key]
        if not isinstance(value, expected):
            raise ConfigError(
                f"'{key}' must be a {expected.__name__}, got {type(value).__name__}",
                file_path=file_path,
            )
        if expected is list and not all(isinstance(v, str) for v in value):
            raise ConfigError(f"'{key}' must be a list of strings", file_path=file_path)
        values[key] = value
    return ProjectConfig(**values)
