"""Error types raised by FileSearch.

Every failure reaches the immediate caller as one of these types; nothing is
retried or suppressed inside the package.
"""

from __future__ import annotations


class FileSearchError(Exception):
    """Base class for all FileSearch errors."""


class ConfigurationError(FileSearchError, ValueError):
    """Client settings are missing or invalid; raised before any I/O."""


class ConstructionError(FileSearchError):
    """The index existence check or index creation failed during construction.

    The client that raised it is unusable and must be discarded.
    """


class TransportError(FileSearchError):
    """An engine call failed at the transport level or was rejected.

    The message of the underlying failure is kept verbatim.
    """


class QueryError(FileSearchError):
    """The engine reported a search response as invalid.

    Attributes:
        debug_information: Engine diagnostics (call summary, error reason and
            raw response body).
    """

    def __init__(self, message: str, debug_information: str = "") -> None:
        super().__init__(message)
        self.debug_information = debug_information

    def __str__(self) -> str:
        base = super().__str__()
        if not self.debug_information:
            return base
        return f"{base}\n{self.debug_information}"
