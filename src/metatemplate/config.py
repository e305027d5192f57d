"""Configuration system for metatemplate.

Manages project configuration via .metatemplate/config.toml with typed
dataclasses and sensible defaults for all values.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

import tomli_w

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from metatemplate.exceptions import ConfigError
from metatemplate.registry import default_registry

if TYPE_CHECKING:
    from pathlib import Path

_T = TypeVar("_T")

__all__ = [
    "DEFAULT_FORMATS",
    "MetaTemplateConfig",
    "OutputConfig",
    "ProjectConfig",
    "TemplatesConfig",
    "default_config",
    "load_config",
    "save_config",
    "unknown_formats",
]

logger = logging.getLogger(__name__)

DEFAULT_FORMATS = ("mustache", "react-ts-styled-components")


@dataclass
class ProjectConfig:
    """[project] section."""

    name: str = ""
    description: str = ""


@dataclass
class TemplatesConfig:
    """[templates] section."""

    source_dir: str = "templates"


@dataclass
class OutputConfig:
    """[output] section."""

    formats: list[str] = field(default_factory=lambda: list(DEFAULT_FORMATS))
    directory: str = "dist"
    index: bool = True


@dataclass
class MetaTemplateConfig:
    """Root configuration combining all sections."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


_SECTIONS: dict[str, type] = {
    "project": ProjectConfig,
    "templates": TemplatesConfig,
    "output": OutputConfig,
}


def default_config() -> MetaTemplateConfig:
    """Return a config with all default values."""
    return MetaTemplateConfig()


def _config_to_dict(config: MetaTemplateConfig) -> dict[str, object]:
    """Convert MetaTemplateConfig to a nested dict suitable for TOML serialization."""
    return {name: dict(vars(getattr(config, name))) for name in _SECTIONS}


def save_config(config: MetaTemplateConfig, path: Path) -> None:
    """Save configuration to a TOML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = _config_to_dict(config)
    try:
        with path.open("wb") as f:
            tomli_w.dump(data, f)
        logger.info("Saved config to %s", path)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise ConfigError(f"Failed to save config to {path}: {e}") from e


def _load_section(cls: type[_T], data: object) -> _T:
    """Load a dataclass section from a dict, ignoring unknown keys."""
    if not isinstance(data, dict):
        raise ConfigError(f"Config section for {cls.__name__} must be a table")
    known_fields = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
    filtered = {k: v for k, v in data.items() if k in known_fields}
    return cls(**filtered)


def load_config(path: Path) -> MetaTemplateConfig:
    """Load configuration from a TOML file.

    Missing sections or keys get default values.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_bytes()
        data = tomllib.loads(raw.decode("utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    config = MetaTemplateConfig()
    for name, cls in _SECTIONS.items():
        if name in data:
            setattr(config, name, _load_section(cls, data[name]))

    if isinstance(config.output.formats, str):
        config.output.formats = [config.output.formats]

    for format_id in unknown_formats(config):
        logger.warning("Config lists unknown format '%s'", format_id)

    logger.info("Loaded config from %s", path)
    return config


def unknown_formats(config: MetaTemplateConfig) -> list[str]:
    """Return the configured format ids that no registered format provides."""
    return [f for f in config.output.formats if not default_registry.has_format(f)]
