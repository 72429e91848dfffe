from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from dataclasses import fields
from datetime import datetime, timezone
from typing import Any, Generic, Mapping, Optional, Sequence, TypeVar

from dateutil import parser as dt_parser

from FileSearch.core.fields import source_name

DocumentT = TypeVar("DocumentT")


@dataclass(frozen=True, slots=True)
class Attachment:
    """Text and metadata extracted by the engine's ``attachment`` pipeline.

    Attribute names follow the ingest attachment processor output, which is
    snake_case on the engine side as well.
    """

    content: Optional[str] = field(default=None, metadata={"source": "content"})
    content_type: Optional[str] = field(default=None, metadata={"source": "content_type"})
    content_length: Optional[int] = field(default=None, metadata={"source": "content_length"})
    title: Optional[str] = field(default=None, metadata={"source": "title"})
    author: Optional[str] = field(default=None, metadata={"source": "author"})
    keywords: Optional[str] = field(default=None, metadata={"source": "keywords"})
    date: Optional[datetime] = field(default=None, metadata={"source": "date"})
    language: Optional[str] = field(default=None, metadata={"source": "language"})
    name: Optional[str] = field(default=None, metadata={"source": "name"})

    def to_source(self) -> dict[str, Any]:
        return _dump(self)

    @classmethod
    def from_source(cls, source: Mapping[str, Any]) -> Attachment:
        return cls(**_load_values(cls, source))


@dataclass(frozen=True, slots=True)
class Document:
    """Indexed file document.

    Only ``id`` is interpreted by FileSearch. ``content_base64`` is consumed by
    the engine-side pipeline, which fills ``attachment``.

    Attributes:
        id: Integer document identity, also used as the engine ``_id``.
        data_change: Last change timestamp of the underlying file.
        content_base64: Base64-encoded file content.
        attachment: Extracted attachment payload.
    """

    id: int
    data_change: Optional[datetime] = None
    content_base64: Optional[str] = None
    attachment: Optional[Attachment] = None

    def to_source(self) -> dict[str, Any]:
        """Serialize to the engine ``_source`` shape (unset values omitted)."""
        return _dump(self)

    @classmethod
    def from_source(cls, source: Mapping[str, Any], hit_id: Any = None) -> Document:
        """Build a document from an engine ``_source`` mapping.

        Args:
            source: Stored ``_source`` body.
            hit_id: Engine ``_id`` of the hit, used when the source carries
                no integer ``id``.

        Raises:
            ValueError: If neither the source nor ``hit_id`` holds an
                integer identity.
        """
        values = _load_values(cls, source)
        raw_attachment = values.get("attachment")
        values["attachment"] = Attachment.from_source(raw_attachment) if isinstance(raw_attachment, Mapping) else None
        doc_id = _parse_int(values.get("id"))
        if doc_id is None:
            doc_id = _parse_int(hit_id)
        if doc_id is None:
            raise ValueError(f"Document has no integer id (source id={values.get('id')!r}, hit id={hit_id!r})")
        values["id"] = doc_id
        return cls(**values)


@dataclass(frozen=True, slots=True)
class SearchHit(Generic[DocumentT]):
    """One normalized search hit.

    Attributes:
        id: Engine-assigned ``_id``.
        document: Stored source document.
        highlights: Highlight snippets of all fields, in response field order.
        suggestions: Suggested texts of all suggesters (scores dropped).
    """

    id: str
    document: DocumentT
    highlights: Sequence[str] = ()
    suggestions: Sequence[str] = ()


@dataclass(frozen=True, slots=True)
class Acknowledgement:
    """Engine acknowledgement of a write.

    Attributes:
        id: Document ``_id`` as reported by the engine.
        index: Index that received the write.
        result: Engine result string (``created``, ``updated``, ``deleted``...).
        version: Document version after the write, if reported.
        status_code: HTTP status code of the write call.
    """

    id: str
    index: str
    result: str
    version: Optional[int] = None
    status_code: int = 200


def _dump(value: Any) -> dict[str, Any]:
    """Serialize a document dataclass into its source mapping."""
    out: dict[str, Any] = {}
    for attr in fields(value):
        item = getattr(value, attr.name)
        if item is None:
            continue
        if hasattr(item, "to_source"):
            item = item.to_source()
        elif isinstance(item, datetime):
            item = item.isoformat()
        out[source_name(attr)] = item
    return out


def _load_values(cls: type, source: Mapping[str, Any]) -> dict[str, Any]:
    """Read dataclass attribute values from a source mapping.

    Datetime attributes are parsed from ISO-8601 text; unparseable values
    become ``None``.
    """
    values: dict[str, Any] = {}
    for attr in fields(cls):
        key = source_name(attr)
        if key not in source:
            continue
        raw = source[key]
        if attr.name in _DATETIME_ATTRS:
            raw = _parse_iso_datetime(raw)
        values[attr.name] = raw
    return values


def _parse_int(raw_value: Any) -> int | None:
    """Return an integer identity from an int or digit string; anything else is ``None``."""
    if isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, int):
        return raw_value
    if not isinstance(raw_value, str):
        return None
    try:
        return int(raw_value.strip())
    except ValueError:
        return None


def _parse_iso_datetime(raw_value: Any) -> datetime | None:
    """Parse ISO datetime text into timezone-aware datetime."""
    if not isinstance(raw_value, str) or not raw_value:
        return None
    try:
        parsed = dt_parser.isoparse(raw_value)
    except (TypeError, ValueError):
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


_DATETIME_ATTRS = frozenset({"data_change", "date"})
