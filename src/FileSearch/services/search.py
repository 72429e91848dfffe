"""Search client: engine connection lifecycle and document operations."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol
from urllib.parse import urlparse

from FileSearch.core.models import Acknowledgement, Document, SearchHit
from FileSearch.core.request import RequestSpec
from FileSearch.engine.async_client import AsyncElasticApiClient
from FileSearch.engine.client import ElasticApiClient
from FileSearch.engine.compiler import compile_request
from FileSearch.engine.parser import parse_search_response
from FileSearch.engine.response import EngineResponse
from FileSearch.errors import ConfigurationError, ConstructionError, QueryError, TransportError
from FileSearch.utils.log import log
from FileSearch.utils.trace import EventRecorder

PATH_ANALYZER = "windows_path_hierarchy_analyzer"
PATH_TOKENIZER = "windows_path_hierarchy_tokenizer"
DEFAULT_PATH_DELIMITER = "\\"
INGEST_PIPELINE = "attachment"
REFRESH_POLICY = "wait_for"


class IndexableDocument(Protocol):
    """Document accepted by ``SearchClient.insert_doc``."""

    id: int

    def to_source(self) -> Mapping[str, Any]:
        """Return the engine ``_source`` body."""
        raise NotImplementedError


def build_index_body(path_delimiter: str = DEFAULT_PATH_DELIMITER) -> dict[str, Any]:
    """Return the index creation body with the path hierarchy analyzer.

    Args:
        path_delimiter: Path separator split by the tokenizer.

    Returns:
        ``settings.analysis`` body declaring the tokenizer and analyzer.
    """
    return {
        "settings": {
            "analysis": {
                "analyzer": {
                    PATH_ANALYZER: {
                        "type": "custom",
                        "tokenizer": PATH_TOKENIZER,
                    }
                },
                "tokenizer": {
                    PATH_TOKENIZER: {
                        "type": "path_hierarchy",
                        "delimiter": path_delimiter,
                    }
                },
            }
        }
    }


class SearchClient:
    """Client bound to one index of the search engine.

    Construction validates the settings before any I/O, then makes sure the
    index exists, creating it with ``windows_path_hierarchy_analyzer`` when
    absent. Settings are read-only afterwards.

    Blocking operations use ``ElasticApiClient``; the ``*_async`` variants use
    ``AsyncElasticApiClient`` and have the same semantics.
    """

    def __init__(
        self,
        index_name: str,
        node: str | None,
        *,
        path_delimiter: str = DEFAULT_PATH_DELIMITER,
        timeout: float | None = None,
        api_client: ElasticApiClient | None = None,
        async_api_client: AsyncElasticApiClient | None = None,
        recorder: EventRecorder | None = None,
        document_factory: Callable[[Mapping[str, Any], str], Any] | None = Document.from_source,
    ) -> None:
        """Validate settings and ensure the index exists.

        Args:
            index_name: Target index name.
            node: Engine node address, e.g. ``http://localhost:9200``.
            path_delimiter: Delimiter of the path hierarchy tokenizer.
            timeout: Request timeout in seconds for every engine call.
            api_client: Optional blocking client (built from ``node`` otherwise).
            async_api_client: Optional non-blocking client (built lazily otherwise).
            recorder: Call event recorder handed to clients built here.
            document_factory: Converter called with each hit ``_source`` and
                its ``_id``; ``None`` keeps raw mappings.

        Raises:
            ConfigurationError: If ``node`` or ``index_name`` is missing or invalid.
            ConstructionError: If the index check or creation fails.
        """
        self._node = _check_settings(index_name=index_name, node=node, path_delimiter=path_delimiter)
        self._index_name = index_name
        self._path_delimiter = path_delimiter
        self._timeout = timeout
        self._recorder = recorder
        self._document_factory = document_factory
        self._api = api_client or ElasticApiClient(self._node, timeout=timeout, recorder=recorder)
        self._async_api = async_api_client

        self._ensure_index()

    @property
    def index_name(self) -> str:
        return self._index_name

    @property
    def node(self) -> str:
        return self._node

    @property
    def path_delimiter(self) -> str:
        return self._path_delimiter

    def close(self) -> None:
        """Close the blocking client.

        An async client created by the ``*_async`` operations is left open;
        use ``aclose`` (or ``async with``) after async use.
        """
        self._api.close()
        if self._async_api is not None:
            log.warning("SearchClient.close() left the async engine client open; use aclose()")

    async def aclose(self) -> None:
        """Close both clients."""
        self._api.close()
        if self._async_api is not None:
            await self._async_api.aclose()

    def __enter__(self) -> SearchClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def __aenter__(self) -> SearchClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # Search

    def search(self, spec: RequestSpec) -> list[SearchHit]:
        """Compile ``spec``, run it and normalize the hits.

        Args:
            spec: Structured request.

        Returns:
            Normalized hits in engine order.

        Raises:
            QueryError: If the engine reports the response as invalid.
            TransportError: If the call fails at the transport level.
        """
        body = compile_request(spec)
        log.debug("Search on index=%s sections=%s", self._index_name, sorted(body))
        response = self._api.search(self._index_name, body)
        return self._normalize(response)

    async def search_async(self, spec: RequestSpec) -> list[SearchHit]:
        """Non-blocking variant of ``search``."""
        body = compile_request(spec)
        log.debug("Async search on index=%s sections=%s", self._index_name, sorted(body))
        response = await self._async_client().search(self._index_name, body)
        return self._normalize(response)

    # Documents

    def insert_doc(self, document: IndexableDocument) -> Acknowledgement:
        """Index ``document`` through the ``attachment`` pipeline.

        Returns only after the engine made the document searchable.

        Raises:
            TransportError: If the call fails or the engine rejects the write.
        """
        response = self._api.index_document(
            self._index_name,
            document.id,
            document.to_source(),
            pipeline=INGEST_PIPELINE,
            refresh=REFRESH_POLICY,
        )
        return self._acknowledge(response, doc_id=document.id)

    async def insert_doc_async(self, document: IndexableDocument) -> Acknowledgement:
        """Non-blocking variant of ``insert_doc``."""
        response = await self._async_client().index_document(
            self._index_name,
            document.id,
            document.to_source(),
            pipeline=INGEST_PIPELINE,
            refresh=REFRESH_POLICY,
        )
        return self._acknowledge(response, doc_id=document.id)

    def delete_doc(self, doc_id: int) -> Acknowledgement:
        """Delete the document with identity ``doc_id``.

        Raises:
            TransportError: If the call fails or the engine rejects the delete.
        """
        response = self._api.delete_document(self._index_name, doc_id)
        return self._acknowledge(response, doc_id=doc_id)

    async def delete_doc_async(self, doc_id: int) -> Acknowledgement:
        """Non-blocking variant of ``delete_doc``."""
        response = await self._async_client().delete_document(self._index_name, doc_id)
        return self._acknowledge(response, doc_id=doc_id)

    # Internals

    def _ensure_index(self) -> None:
        """Create the index when it does not exist yet; failures are fatal."""
        try:
            if self._api.index_exists(self._index_name):
                log.debug("Index exists: %s", self._index_name)
                return
            response = self._api.create_index(self._index_name, build_index_body(self._path_delimiter))
        except TransportError as e:
            raise ConstructionError(f"Cannot ensure index {self._index_name}: {e}") from e

        if not response.ok:
            raise ConstructionError(f"Cannot create index {self._index_name}: {response.error_reason()}")
        log.info("Created index %s with analyzer %s", self._index_name, PATH_ANALYZER)

    def _async_client(self) -> AsyncElasticApiClient:
        if self._async_api is None:
            self._async_api = AsyncElasticApiClient(self._node, timeout=self._timeout, recorder=self._recorder)
        return self._async_api

    def _normalize(self, response: EngineResponse) -> list[SearchHit]:
        if not response.ok or not isinstance(response.body, Mapping):
            raise QueryError(
                f"Search on index {self._index_name} failed: {response.error_reason()}",
                response.debug_information(),
            )
        try:
            hits = parse_search_response(response.json_body(), document_factory=self._document_factory)
        except (ValueError, TypeError) as e:
            raise QueryError(
                f"Search on index {self._index_name} returned a hit that cannot be converted: {e}",
                response.debug_information(),
            ) from e
        log.debug("Search on index=%s returned %d hits", self._index_name, len(hits))
        return hits

    def _acknowledge(self, response: EngineResponse, *, doc_id: int) -> Acknowledgement:
        if not response.ok:
            raise TransportError(response.error_reason())
        body = response.json_body()
        version = body.get("_version")
        return Acknowledgement(
            id=str(body.get("_id", doc_id)),
            index=str(body.get("_index", self._index_name)),
            result=str(body.get("result", "")),
            version=version if isinstance(version, int) else None,
            status_code=response.status_code,
        )


def _check_settings(*, index_name: str, node: str | None, path_delimiter: str) -> str:
    """Validate client settings without touching the network.

    Returns:
        The stripped node address.

    Raises:
        ConfigurationError: If a setting is missing or malformed.
    """
    if node is None or not str(node).strip():
        raise ConfigurationError("Search engine node address is not set")
    parsed = urlparse(str(node).strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"Search engine node address must be an http(s) URL: {node}")
    if not index_name:
        raise ConfigurationError("Index name for search is not set")
    if len(path_delimiter) != 1:
        raise ConfigurationError("Path delimiter must be a single character")
    return str(node).strip()
