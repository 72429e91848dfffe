"""Blocking engine HTTP client.

Issues one request per call over a reusable ``requests`` session and reports
every completed call to the event recorder. Calls are never retried.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import requests

from FileSearch.engine.response import HEADERS, EngineResponse, build_url, decode_body, encode_body, write_params
from FileSearch.errors import TransportError
from FileSearch.utils.log import log
from FileSearch.utils.trace import EventRecorder, LoggingEventRecorder

DEFAULT_TIMEOUT = 30.0


class ElasticApiClient:
    """Low-level HTTP client for the search engine REST API.

    Responsible only for making network requests and returning raw engine
    responses. Query compilation and response normalization happen elsewhere.
    """

    def __init__(
        self,
        node: str,
        *,
        timeout: Optional[float] = None,
        recorder: EventRecorder | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            node: Engine node address, e.g. ``http://localhost:9200``.
            timeout: Request timeout in seconds.
            recorder: Receives one event per completed call.
            session: Optional pre-built session.
        """
        self.node = node
        self.timeout = timeout or DEFAULT_TIMEOUT
        self._recorder = recorder or LoggingEventRecorder()
        self._session = session or requests.Session()

    def close(self) -> None:
        """Close the underlying HTTP session and release pooled connections."""
        self._session.close()

    def __enter__(self) -> ElasticApiClient:
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager and close session."""
        self.close()

    def index_exists(self, index: str) -> bool:
        """Return whether ``index`` exists.

        Raises:
            TransportError: On transport failure or a status other than 200/404.
        """
        response = self.request("HEAD", build_url(self.node, index))
        if response.status_code == 404:
            return False
        if not response.ok:
            raise TransportError(response.error_reason())
        return True

    def create_index(self, index: str, body: Mapping[str, Any]) -> EngineResponse:
        """Create ``index`` with the given settings/mappings body."""
        return self.request("PUT", build_url(self.node, index), body=body)

    def search(self, index: str, body: Mapping[str, Any]) -> EngineResponse:
        """Run a ``_search`` request against ``index``."""
        return self.request("POST", build_url(self.node, index, "_search"), body=body)

    def index_document(
        self,
        index: str,
        doc_id: int | str,
        source: Mapping[str, Any],
        *,
        pipeline: str | None = None,
        refresh: str | None = None,
    ) -> EngineResponse:
        """Index one document under ``doc_id``.

        Args:
            index: Target index.
            doc_id: Document identity.
            source: Document source body.
            pipeline: Ingest pipeline applied before indexing.
            refresh: Refresh policy (``wait_for`` blocks until searchable).
        """
        params = write_params(pipeline=pipeline, refresh=refresh)
        url = build_url(self.node, index, "_doc", doc_id, params=params)
        return self.request("PUT", url, body=source)

    def delete_document(self, index: str, doc_id: int | str) -> EngineResponse:
        """Delete the document stored under ``doc_id``."""
        return self.request("DELETE", build_url(self.node, index, "_doc", doc_id))

    def request(self, method: str, url: str, *, body: Mapping[str, Any] | None = None) -> EngineResponse:
        """Send one request and record the completed call.

        Args:
            method: HTTP method.
            url: Full request URL.
            body: Optional JSON body.

        Returns:
            EngineResponse for any HTTP status.

        Raises:
            TransportError: If the request fails before a response arrives.
        """
        payload = encode_body(body)
        try:
            resp = self._session.request(
                method,
                url,
                data=payload.encode("utf-8") if payload is not None else None,
                headers=HEADERS,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.debug("Engine request failed: method=%s url=%s error=%s", method, url, e)
            raise TransportError(str(e)) from e

        response = EngineResponse(
            method=method,
            url=url,
            status_code=resp.status_code,
            request_body=payload,
            text=resp.text,
            body=decode_body(resp.text),
        )
        self._recorder.record(response.to_event())
        return response

