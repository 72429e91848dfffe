"""Engine call tracing.

Engine clients report every completed call to an ``EventRecorder``. The
default recorder writes the call and its response to the package logger; tests
and hosts can inject their own recorder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from FileSearch.utils.log import log


@dataclass(frozen=True, slots=True)
class CallEvent:
    """One completed engine call.

    Attributes:
        method: HTTP method.
        url: Full request URL including query string.
        request_body: Serialized request body, if any.
        status_code: HTTP status code returned by the engine.
        response_body: Raw response text, if any.
    """

    method: str
    url: str
    request_body: str | None
    status_code: int
    response_body: str | None


class EventRecorder(Protocol):
    """Collaborator receiving engine call events."""

    def record(self, event: CallEvent) -> None:
        """Record one completed call."""
        raise NotImplementedError


class LoggingEventRecorder:
    """Write call events to the FileSearch logger at INFO level."""

    def record(self, event: CallEvent) -> None:
        if event.request_body:
            log.info("%s %s\n%s", event.method, event.url, event.request_body)
        else:
            log.info("%s %s", event.method, event.url)

        if event.response_body:
            log.info("Status: %s\n%s\n", event.status_code, event.response_body)
        else:
            log.info("Status: %s", event.status_code)
