"""Search engine connection configuration (the ``engine`` section)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from FileSearch.config.common import (
    check_http_url,
    check_positive,
    expect_number,
    expect_str,
    get_section,
    read_value,
)
from FileSearch.errors import ConfigurationError

DEFAULT_PATH_DELIMITER = "\\"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Store validated engine connection settings.

    Attributes:
        node: Engine node address.
        index_name: Index every operation targets.
        path_delimiter: Delimiter of the path hierarchy tokenizer.
        timeout: Request timeout in seconds.
    """

    node: str
    index_name: str
    path_delimiter: str = DEFAULT_PATH_DELIMITER
    timeout: float = DEFAULT_TIMEOUT


def load_engine(raw: Mapping[str, Any]) -> EngineConfig:
    """Load the ``engine`` section.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed engine configuration; ``node`` and ``index_name`` are stripped.

    Raises:
        TypeError: If an entry has the wrong YAML type.
        ConfigurationError: If a required entry is missing.
    """
    section = get_section(raw, "engine", required=True)
    node = expect_str(read_value(section, "engine.node"), "engine.node")
    index_name = expect_str(read_value(section, "engine.index_name"), "engine.index_name")
    delimiter = read_value(section, "engine.path_delimiter", DEFAULT_PATH_DELIMITER)
    timeout = read_value(section, "engine.timeout", DEFAULT_TIMEOUT)
    return EngineConfig(
        node=node.strip(),
        index_name=index_name.strip(),
        path_delimiter=expect_str(delimiter, "engine.path_delimiter"),
        timeout=expect_number(timeout, "engine.timeout"),
    )


def check_engine(config: EngineConfig) -> None:
    """Validate engine domain constraints.

    Index names follow the engine rule of being non-empty and lower case.

    Raises:
        ConfigurationError: If values violate engine constraints.
    """
    check_http_url(config.node, "engine.node")
    if not config.index_name:
        raise ConfigurationError("engine.index_name must not be empty")
    if config.index_name != config.index_name.lower():
        raise ConfigurationError("engine.index_name must be lowercase")
    if len(config.path_delimiter) != 1:
        raise ConfigurationError("engine.path_delimiter must be a single character")
    check_positive(config.timeout, "engine.timeout")
