"""Public configuration API for FileSearch."""

from __future__ import annotations

from FileSearch.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from FileSearch.config.engine import EngineConfig
from FileSearch.config.runtime import RuntimeConfig

__all__ = [
    "AppConfig",
    "EngineConfig",
    "RuntimeConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
]
