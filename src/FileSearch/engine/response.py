"""Engine call results shared by the blocking and non-blocking clients."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import quote, urlencode

from FileSearch.utils.trace import CallEvent

HEADERS = {
    "User-Agent": "file-search/0.1",
    "Accept": "application/json",
    "Content-Type": "application/json",
}


@dataclass(frozen=True, slots=True)
class EngineResponse:
    """One completed engine call.

    Attributes:
        method: HTTP method.
        url: Full request URL.
        status_code: HTTP status code.
        request_body: Serialized request body, if any.
        text: Raw response text.
        body: Decoded JSON body, or ``None`` when absent or not JSON.
    """

    method: str
    url: str
    status_code: int
    request_body: str | None
    text: str
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json_body(self) -> Mapping[str, Any]:
        """Return the decoded body as a mapping (empty when not an object)."""
        return self.body if isinstance(self.body, Mapping) else {}

    def error_reason(self) -> str:
        """Return the engine's error summary, e.g. ``type: reason``."""
        error = self.json_body().get("error")
        if isinstance(error, Mapping):
            kind = error.get("type")
            reason = error.get("reason")
            if kind and reason:
                return f"{kind}: {reason}"
            if reason:
                return str(reason)
        elif isinstance(error, str) and error:
            return error
        result = self.json_body().get("result")
        if isinstance(result, str) and result:
            return f"{self.method} {self.url} returned {self.status_code} ({result})"
        return f"{self.method} {self.url} returned {self.status_code}"

    def debug_information(self) -> str:
        """Multi-line diagnostics of the call, used for invalid search responses."""
        lines = [
            f"Invalid engine response built from an unsuccessful ({self.status_code}) low level call on {self.method}: {self.url}",
            f"# Server error: {self.error_reason()}",
        ]
        if self.request_body:
            lines.append(f"# Request:\n{self.request_body}")
        if self.text:
            lines.append(f"# Response:\n{self.text}")
        return "\n".join(lines)

    def to_event(self) -> CallEvent:
        return CallEvent(
            method=self.method,
            url=self.url,
            request_body=self.request_body,
            status_code=self.status_code,
            response_body=self.text or None,
        )


def build_url(node: str, *segments: str | int, params: Mapping[str, str] | None = None) -> str:
    """Join node address, escaped path segments and query parameters.

    Args:
        node: Engine node address, e.g. ``http://localhost:9200``.
        *segments: Path segments; each is percent-escaped.
        params: Optional query parameters.

    Returns:
        Full request URL.
    """
    path = "/".join(quote(str(segment), safe="") for segment in segments)
    url = f"{node.rstrip('/')}/{path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return url


def encode_body(body: Mapping[str, Any] | None) -> str | None:
    """Serialize a request body as JSON text."""
    if body is None:
        return None
    return json.dumps(body, ensure_ascii=False)


def decode_body(text: str) -> Any:
    """Decode a JSON response body; non-JSON text yields ``None``."""
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def write_params(*, pipeline: str | None, refresh: str | None) -> dict[str, str]:
    """Build query parameters of a document write."""
    params: dict[str, str] = {}
    if pipeline:
        params["pipeline"] = pipeline
    if refresh:
        params["refresh"] = refresh
    return params
