"""
Persisted settings for git-automate.

Settings live in a small TOML file in the current working directory.
When the file is missing the built-in defaults apply; when it is present
it must provide every key, so a run never mixes file values with
defaults.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import tomli_w

from .errors import ConfigError

LOG = logging.getLogger(__name__)

CONFIG_FILENAME = "git-automate.toml"


@dataclass(frozen=True)
class Settings:
    """
    Repository-level settings.

    commit_template contains one "{}" placeholder. It is stored and
    validated but message generation does not substitute into it.
    """

    default_remote: str = "origin"
    commit_template: str = "feat: {}"
    auto_pull: bool = True


_EXPECTED_TYPES = {
    "default_remote": str,
    "commit_template": str,
    "auto_pull": bool,
}


def load_settings(path: Union[str, Path] = CONFIG_FILENAME) -> Settings:
    """
    Load settings from path, falling back to defaults if it does not exist.

    Raises ConfigError if the file exists but cannot be read, is not
    valid TOML, lacks a key, or holds a value of the wrong type.
    """

    config_path = Path(path)
    if not config_path.exists():
        LOG.debug("No settings file at %s; using defaults", config_path)
        return Settings()

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"failed to read config file {config_path}: {exc}") from exc

    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"failed to parse config file {config_path}: {exc}") from exc

    settings = _settings_from_mapping(raw, config_path)
    LOG.debug("Loaded settings from %s: %s", config_path, settings)
    return settings


def _settings_from_mapping(raw: Dict[str, Any], source: Path) -> Settings:
    known = {f.name for f in fields(Settings)}

    unknown = sorted(set(raw) - known)
    if unknown:
        LOG.debug("Ignoring unknown keys in %s: %s", source, ", ".join(unknown))

    missing = sorted(known - set(raw))
    if missing:
        raise ConfigError(
            f"failed to parse config file {source}: missing keys: {', '.join(missing)}"
        )

    values: Dict[str, Any] = {}
    for name, expected in _EXPECTED_TYPES.items():
        value = raw[name]
        if not isinstance(value, expected):
            raise ConfigError(
                f"failed to parse config file {source}: "
                f"{name} must be a {expected.__name__}, got {type(value).__name__}"
            )
        values[name] = value

    if not values["default_remote"].strip():
        raise ConfigError(f"failed to parse config file {source}: default_remote must not be empty")

    return Settings(**values)


def dump_settings(settings: Settings) -> str:
    return tomli_w.dumps(asdict(settings))


def write_default_settings(path: Union[str, Path] = CONFIG_FILENAME) -> Path:
    """
    Write the default settings to path, replacing any existing file.
    """

    config_path = Path(path)
    try:
        config_path.write_text(dump_settings(Settings()), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed to write config file {config_path}: {exc}") from exc
    return config_path
