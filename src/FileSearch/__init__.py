"""FileSearch: typed search requests compiled for a full-text search engine.

Typical use::

    from FileSearch import Document, RequestSpec, SearchClient, field_ref, match_query

    client = SearchClient("files", "http://localhost:9200")
    content = field_ref(Document, "attachment.content")
    hits = client.search(RequestSpec(query=match_query(content, "invoice")))
"""

from __future__ import annotations

from FileSearch.core.fields import FieldRef, field_ref
from FileSearch.core.models import Acknowledgement, Attachment, Document, SearchHit
from FileSearch.core.request import RequestSpec, match_query
from FileSearch.engine.compiler import compile_request
from FileSearch.engine.parser import parse_search_response
from FileSearch.errors import (
    ConfigurationError,
    ConstructionError,
    FileSearchError,
    QueryError,
    TransportError,
)
from FileSearch.services import SearchClient, create_search_client

__all__ = [
    "Acknowledgement",
    "Attachment",
    "ConfigurationError",
    "ConstructionError",
    "Document",
    "FieldRef",
    "FileSearchError",
    "QueryError",
    "RequestSpec",
    "SearchClient",
    "SearchHit",
    "TransportError",
    "compile_request",
    "create_search_client",
    "field_ref",
    "match_query",
    "parse_search_response",
]
