"""Root configuration and YAML loading.

A deployment keeps ``config/default.yml`` untouched and passes a small
override file; the override is deep-merged over the defaults before any
section is parsed, so validation always sees the effective values.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from FileSearch.config.engine import EngineConfig, check_engine, load_engine
from FileSearch.config.runtime import RuntimeConfig, check_runtime, load_runtime
from FileSearch.errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Effective FileSearch configuration."""

    runtime: RuntimeConfig
    engine: EngineConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Build and validate AppConfig from an already merged mapping.

    Raises:
        TypeError: If an entry has the wrong YAML type.
        ConfigurationError: If an entry is missing or invalid.
    """
    config = AppConfig(runtime=load_runtime(raw), engine=load_engine(raw))
    check_runtime(config.runtime)
    check_engine(config.engine)
    return config


def load_config(path: Path) -> AppConfig:
    """Load one YAML file as the complete configuration."""
    return parse_config_dict(read_yaml(path))


def load_config_with_defaults(config_path: Path, default_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load ``config_path`` layered over the defaults file.

    Args:
        config_path: Override file; may hold only the entries it changes.
        default_path: Complete defaults file.

    Returns:
        Validated configuration of the merged mapping.
    """
    merged = read_yaml(default_path)
    if Path(config_path).resolve() != Path(default_path).resolve():
        merged = merge_config_dicts(merged, read_yaml(config_path))
    return parse_config_dict(merged)


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML file whose root must be a mapping (an empty file is ``{}``).

    Raises:
        ConfigurationError: If the root is not a mapping.
    """
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Config root must be a mapping: {path}")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` applied; nested sections merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            value = merge_config_dicts(current, value)
        merged[key] = value
    return merged
