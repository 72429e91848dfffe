"""Helpers reading typed values out of the raw YAML mapping.

Every helper takes the dotted config key (e.g. ``engine.node``) so error
messages point at the exact entry of the YAML file. Missing or malformed
values raise ``ConfigurationError``; values of the wrong YAML type raise
``TypeError``.
"""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlparse

from FileSearch.errors import ConfigurationError

_MISSING = object()


def get_section(raw: Mapping[str, Any], name: str, *, required: bool) -> Mapping[str, Any]:
    """Return the top-level section ``name``.

    Args:
        raw: Root configuration mapping.
        name: Section name, e.g. ``engine``.
        required: Whether a missing section is an error.

    Returns:
        Section mapping; an empty mapping for an absent optional section.

    Raises:
        ConfigurationError: If a required section is absent.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(name)
    if section is None:
        if required:
            raise ConfigurationError(f"Missing required config: {name}")
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"{name} must be an object")
    return section


def read_value(section: Mapping[str, Any], config_key: str, default: Any = _MISSING) -> Any:
    """Read the entry named by the last segment of ``config_key``.

    Args:
        section: Section mapping holding the entry.
        config_key: Dotted key such as ``engine.timeout``.
        default: Fallback for optional entries; omit for required ones.

    Raises:
        ConfigurationError: If a required entry is absent.
    """
    name = config_key.rsplit(".", 1)[-1]
    value = section.get(name, default)
    if value is _MISSING:
        raise ConfigurationError(f"Missing required config: {config_key}")
    return value


def expect_str(value: Any, config_key: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{config_key} must be a string")
    return value


def expect_bool(value: Any, config_key: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{config_key} must be a boolean")
    return value


def expect_number(value: Any, config_key: str) -> float:
    """Return a YAML int or float as float; booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{config_key} must be a number")
    return float(value)


def check_http_url(value: str, config_key: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"{config_key} must be an http(s) URL, got {value!r}")


def check_positive(value: float, config_key: str) -> None:
    if value <= 0:
        raise ConfigurationError(f"{config_key} must be positive")


def check_one_of(value: str, allowed: frozenset[str], config_key: str) -> None:
    if value not in allowed:
        raise ConfigurationError(f"{config_key} must be one of {sorted(allowed)}")
