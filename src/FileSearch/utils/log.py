"""FileSearch logging utilities.

All modules log through the single ``log`` logger. Records are rendered as
``mm-dd HH:MM:SS [LVL] message`` with a four letter level tag.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final

LOGGER_NAME: Final[str] = "FileSearch"

_LEVEL_TAGS: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "CRIT",
}

log = logging.getLogger(LOGGER_NAME)


class _LevelTagFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s [%(leveltag)s] %(message)s", datefmt="%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - stdlib override
        record.leveltag = _LEVEL_TAGS.get(record.levelno, record.levelname[:4])
        return super().format(record)


def log_file_path(log_dir: str | Path, action: str) -> Path:
    """Return a fresh timestamped log file path under ``log_dir/action``."""
    stamp = datetime.now().strftime("%m%d%H%M%S")
    return Path(log_dir or "log") / action / f"{action}_{stamp}.log"


def configure_logging(level: str = "INFO", *, log_path: Path | None = None) -> None:
    """Install console (and optional file) handlers on the package logger.

    The console follows ``level``. The file handler records DEBUG as well so
    the engine call traces of a run end up on disk.

    Args:
        level: Console level name, e.g. ``INFO`` or ``debug``.
        log_path: File to mirror records into; its directory is created.
    """
    formatter = _LevelTagFormatter()
    console_level = logging.getLevelName((level or "INFO").upper())
    if not isinstance(console_level, int):
        console_level = logging.INFO

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for old in list(log.handlers):
        log.removeHandler(old)
        old.close()
    for handler in handlers:
        log.addHandler(handler)
    log.setLevel(logging.DEBUG if log_path is not None else console_level)
    log.propagate = False
