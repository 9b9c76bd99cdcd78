"""Load StopwatchConfig from stopwatch.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from stopwatch._errors import ConfigError
from stopwatch.config import StopwatchConfig

CONFIG_NAMES = ("stopwatch.yaml", "stopwatch.yml", "stopwatch.toml")

_KNOWN_KEYS = frozenset({"output", "comment", "utc", "quiet"})


def load_config(
    root: Path | None = None,
    *,
    path: Path | None = None,
    **overrides: object,
) -> StopwatchConfig:
    """Load StopwatchConfig, optionally merging a config file.

    An explicit *path* is read as-is and must exist. Otherwise *root*
    (default: the working directory) is searched for stopwatch.yaml,
    stopwatch.yml or stopwatch.toml. Overrides whose value is None are
    ignored; the rest take precedence over the file.

    Raises:
        ConfigError: If the file is missing, unparseable, or has unknown keys.

    """
    if path is not None:
        if not path.is_file():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        file_config = _read_config_file(path)
    else:
        file_config = _find_config(root if root is not None else Path.cwd())

    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    _check_types(merged)
    return StopwatchConfig(**merged)


def _find_config(root: Path) -> dict[str, object]:
    """Read the first config file found in root. Returns empty dict otherwise."""
    for name in CONFIG_NAMES:
        candidate = root / name
        if candidate.is_file():
            return _read_config_file(candidate)
    return {}


def _read_config_file(path: Path) -> dict[str, object]:
    if path.suffix == ".toml":
        return _parse_toml(path)
    return _parse_yaml(path)


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config. An empty file is an empty config."""
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path}: expected a mapping at top level, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_stopwatch_section(data, path)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config."""
    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_stopwatch_section(data, path)


def _flatten_stopwatch_section(data: dict[str, object], path: Path) -> dict[str, object]:
    """Extract stopwatch.* keys into top-level config.

    Top-level keys are accepted too; keys inside the ``stopwatch`` section win.
    """
    section = data.get("stopwatch", {})
    if not isinstance(section, dict):
        msg = f"{path}: 'stopwatch' section must be a mapping"
        raise ConfigError(msg)

    result = {k: v for k, v in data.items() if k != "stopwatch"}
    result.update(section)

    unknown = sorted(set(result) - _KNOWN_KEYS)
    if unknown:
        msg = f"{path}: unknown config key(s): {', '.join(unknown)}"
        raise ConfigError(msg)
    return result


def _check_types(values: dict[str, object]) -> None:
    for key in ("output", "comment"):
        if key in values and not isinstance(values[key], (str, Path)):
            msg = f"Config value {key!r} must be a string, got {values[key]!r}"
            raise ConfigError(msg)
    for key in ("utc", "quiet"):
        if key in values and not isinstance(values[key], bool):
            msg = f"Config value {key!r} must be true or false, got {values[key]!r}"
            raise ConfigError(msg)
