"""Canonical field paths for document types.

A document type is a dataclass. Each attribute is stored in the engine under
one source name: ``field.metadata["source"]`` when declared, otherwise the
camelCase form of the attribute name. Nested dataclass attributes extend the
path with a dot.

``field_ref`` resolves a Python attribute path against the per-type table once;
compiled requests only ever carry the resulting canonical path.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class FieldRef:
    """Canonical dotted path of a document field in the engine."""

    path: str

    def __str__(self) -> str:
        return self.path


def source_name(field: dataclasses.Field) -> str:
    """Return the engine-side name of a dataclass attribute."""
    declared = field.metadata.get("source")
    if declared:
        return str(declared)
    return camelize(field.name)


def camelize(name: str) -> str:
    """Convert ``snake_case`` to ``camelCase``."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


@lru_cache(maxsize=None)
def field_paths(doc_type: type) -> Mapping[str, str]:
    """Build the attribute-path to canonical-path table of a document type.

    Args:
        doc_type: Dataclass describing the stored document.

    Returns:
        Read-only mapping such as ``{"attachment.content_type":
        "attachment.content_type", "content_base64": "contentBase64"}``.

    Raises:
        TypeError: If ``doc_type`` is not a dataclass.
    """
    if not dataclasses.is_dataclass(doc_type):
        raise TypeError(f"{doc_type!r} is not a dataclass document type")

    table: dict[str, str] = {}
    _collect_paths(doc_type, attr_prefix="", path_prefix="", table=table, seen=(doc_type,))
    return types.MappingProxyType(table)


def field_ref(doc_type: type, attribute_path: str) -> FieldRef:
    """Resolve an attribute path of ``doc_type`` to its canonical field.

    Args:
        doc_type: Dataclass describing the stored document.
        attribute_path: Dotted Python attribute path, e.g. ``"attachment.content"``.

    Returns:
        FieldRef carrying the canonical engine path.

    Raises:
        ValueError: If the attribute path is not part of the document type.
    """
    table = field_paths(doc_type)
    path = table.get(attribute_path.strip())
    if path is None:
        raise ValueError(f"Unknown field for {doc_type.__name__}: {attribute_path}")
    return FieldRef(path)


def _collect_paths(
    doc_type: type,
    *,
    attr_prefix: str,
    path_prefix: str,
    table: dict[str, str],
    seen: tuple[type, ...],
) -> None:
    """Walk dataclass attributes recursively and fill ``table``."""
    hints = typing.get_type_hints(doc_type)
    for field in dataclasses.fields(doc_type):
        attr = f"{attr_prefix}{field.name}"
        path = f"{path_prefix}{source_name(field)}"
        table[attr] = path

        nested = _nested_dataclass(hints.get(field.name))
        if nested is not None and nested not in seen:
            _collect_paths(
                nested,
                attr_prefix=f"{attr}.",
                path_prefix=f"{path}.",
                table=table,
                seen=seen + (nested,),
            )


def _nested_dataclass(hint: Any) -> type | None:
    """Return the dataclass wrapped by a (possibly optional) type hint."""
    if hint is None:
        return None
    if dataclasses.is_dataclass(hint) and isinstance(hint, type):
        return hint
    for arg in typing.get_args(hint):
        if arg is type(None):
            continue
        if dataclasses.is_dataclass(arg) and isinstance(arg, type):
            return arg
    return None
