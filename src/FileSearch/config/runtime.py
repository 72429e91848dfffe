"""Logging configuration (the ``log`` section)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from FileSearch.config.common import (
    check_one_of,
    expect_bool,
    expect_str,
    get_section,
    read_value,
)
from FileSearch.errors import ConfigurationError
from FileSearch.utils.log import configure_logging, log_file_path

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Logging settings.

    Attributes:
        level: Console log level name, upper case.
        to_file: Whether engine call traces are also written to a file.
        dir: Directory receiving log files.
    """

    level: str
    to_file: bool
    dir: str

    def apply(self, action: str) -> None:
        """Configure the package logger; ``action`` names the log file."""
        log_path = log_file_path(self.dir, action) if self.to_file else None
        configure_logging(self.level, log_path=log_path)


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    section = get_section(raw, "log", required=True)
    level = expect_str(read_value(section, "log.level"), "log.level")
    return RuntimeConfig(
        level=level.strip().upper(),
        to_file=expect_bool(read_value(section, "log.to_file", False), "log.to_file"),
        dir=expect_str(read_value(section, "log.dir", "log"), "log.dir"),
    )


def check_runtime(config: RuntimeConfig) -> None:
    """Reject unknown levels and file logging without a directory."""
    check_one_of(config.level, LOG_LEVELS, "log.level")
    if config.to_file and not config.dir.strip():
        raise ConfigurationError("log.dir must not be empty when log.to_file is true")
