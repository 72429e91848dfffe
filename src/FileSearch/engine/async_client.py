"""Non-blocking engine HTTP client.

Mirror of ``ElasticApiClient`` built on ``httpx.AsyncClient``: every method
suspends only while waiting on the network.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from FileSearch.engine.client import DEFAULT_TIMEOUT
from FileSearch.engine.response import HEADERS, EngineResponse, build_url, decode_body, encode_body, write_params
from FileSearch.errors import TransportError
from FileSearch.utils.log import log
from FileSearch.utils.trace import EventRecorder, LoggingEventRecorder


class AsyncElasticApiClient:
    """Low-level async HTTP client for the search engine REST API."""

    def __init__(
        self,
        node: str,
        *,
        timeout: Optional[float] = None,
        recorder: EventRecorder | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            node: Engine node address, e.g. ``http://localhost:9200``.
            timeout: Request timeout in seconds.
            recorder: Receives one event per completed call.
            transport: Optional httpx transport (e.g. ``httpx.MockTransport``).
        """
        self.node = node
        self.timeout = timeout or DEFAULT_TIMEOUT
        self._recorder = recorder or LoggingEventRecorder()
        self._client = httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers=HEADERS,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncElasticApiClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def index_exists(self, index: str) -> bool:
        """Return whether ``index`` exists.

        Raises:
            TransportError: On transport failure or a status other than 200/404.
        """
        response = await self.request("HEAD", build_url(self.node, index))
        if response.status_code == 404:
            return False
        if not response.ok:
            raise TransportError(response.error_reason())
        return True

    async def create_index(self, index: str, body: Mapping[str, Any]) -> EngineResponse:
        return await self.request("PUT", build_url(self.node, index), body=body)

    async def search(self, index: str, body: Mapping[str, Any]) -> EngineResponse:
        return await self.request("POST", build_url(self.node, index, "_search"), body=body)

    async def index_document(
        self,
        index: str,
        doc_id: int | str,
        source: Mapping[str, Any],
        *,
        pipeline: str | None = None,
        refresh: str | None = None,
    ) -> EngineResponse:
        params = write_params(pipeline=pipeline, refresh=refresh)
        url = build_url(self.node, index, "_doc", doc_id, params=params)
        return await self.request("PUT", url, body=source)

    async def delete_document(self, index: str, doc_id: int | str) -> EngineResponse:
        return await self.request("DELETE", build_url(self.node, index, "_doc", doc_id))

    async def request(self, method: str, url: str, *, body: Mapping[str, Any] | None = None) -> EngineResponse:
        """Send one request and record the completed call.

        Raises:
            TransportError: If the request fails before a response arrives.
        """
        payload = encode_body(body)
        try:
            resp = await self._client.request(
                method,
                url,
                content=payload.encode("utf-8") if payload is not None else None,
            )
        except httpx.HTTPError as e:
            log.debug("Engine async request failed: method=%s url=%s error=%s", method, url, e)
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
