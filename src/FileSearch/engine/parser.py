"""Search response normalizer."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from FileSearch.core.models import SearchHit


def parse_search_response(
    payload: Mapping[str, Any],
    *,
    document_factory: Callable[[Mapping[str, Any], str], Any] | None = None,
) -> list[SearchHit]:
    """Flatten an engine ``_search`` response into one record per hit.

    Args:
        payload: Decoded search response body.
        document_factory: Optional converter called with each ``_source``
            and the hit ``_id``; the raw mapping is kept when omitted.

    Returns:
        Hits in response order. ``highlights`` and ``suggestions`` are
        always sequences, empty when the engine returned none.
    """
    suggestions = parse_suggestions(payload)

    hits_section = payload.get("hits")
    raw_hits = hits_section.get("hits") if isinstance(hits_section, Mapping) else None
    if not isinstance(raw_hits, list):
        return []

    results: list[SearchHit] = []
    for raw_hit in raw_hits:
        if not isinstance(raw_hit, Mapping):
            continue
        hit_id = str(raw_hit.get("_id", ""))
        source = raw_hit.get("_source")
        document = document_factory(source, hit_id) if document_factory is not None and source is not None else source
        results.append(
            SearchHit(
                id=hit_id,
                document=document,
                highlights=_flatten_highlights(raw_hit.get("highlight")),
                suggestions=suggestions,
            )
        )
    return results


def parse_suggestions(payload: Mapping[str, Any]) -> tuple[str, ...]:
    """Collect option texts of all suggesters in response order.

    Args:
        payload: Decoded search response body.

    Returns:
        Suggested texts with scores and offsets dropped.
    """
    suggest = payload.get("suggest")
    if not isinstance(suggest, Mapping):
        return ()

    texts: list[str] = []
    for entries in suggest.values():
        if not isinstance(entries, list):
            continue
        for entry in entries:
            options = entry.get("options") if isinstance(entry, Mapping) else None
            if not isinstance(options, list):
                continue
            for option in options:
                if isinstance(option, Mapping) and isinstance(option.get("text"), str):
                    texts.append(option["text"])
    return tuple(texts)


def _flatten_highlights(highlight: Any) -> tuple[str, ...]:
    """Concatenate per-field snippet lists in field order."""
    if not isinstance(highlight, Mapping):
        return ()

    snippets: list[str] = []
    for fragments in highlight.values():
        if isinstance(fragments, list):
            snippets.extend(item for item in fragments if isinstance(item, str))
    return tuple(snippets)
