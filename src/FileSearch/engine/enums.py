"""Native engine values of the domain enums.

Each table is a tuple indexed by the domain enum ordinal, so position ``n``
must hold the engine value of the member whose value is ``n``.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final

from FileSearch.core.enums import (
    BoundaryScanner,
    HighlighterEncoder,
    HighlighterFragmenter,
    HighlighterOrder,
    HighlighterTagsSchema,
    HighlighterType,
    Operator,
    StringDistance,
    SuggestMode,
    SuggestSort,
    ZeroTermsQuery,
)

SUGGEST_MODE: Final[tuple[str, ...]] = ("missing", "popular", "always")
STRING_DISTANCE: Final[tuple[str, ...]] = (
    "internal",
    "damerau_levenshtein",
    "levenshtein",
    "jaro_winkler",
    "ngram",
)
SUGGEST_SORT: Final[tuple[str, ...]] = ("score", "frequency")
HIGHLIGHTER_TYPE: Final[tuple[str, ...]] = ("plain", "fvh", "unified")
HIGHLIGHTER_FRAGMENTER: Final[tuple[str, ...]] = ("simple", "span")
HIGHLIGHTER_ENCODER: Final[tuple[str, ...]] = ("default", "html")
BOUNDARY_SCANNER: Final[tuple[str, ...]] = ("chars", "sentence", "word")
HIGHLIGHTER_ORDER: Final[tuple[str, ...]] = ("score",)
HIGHLIGHTER_TAGS_SCHEMA: Final[tuple[str, ...]] = ("styled",)
ZERO_TERMS_QUERY: Final[tuple[str, ...]] = ("all", "none")
OPERATOR: Final[tuple[str, ...]] = ("and", "or")

NATIVE_TABLES: Final[dict[type[IntEnum], tuple[str, ...]]] = {
    SuggestMode: SUGGEST_MODE,
    StringDistance: STRING_DISTANCE,
    SuggestSort: SUGGEST_SORT,
    HighlighterType: HIGHLIGHTER_TYPE,
    HighlighterFragmenter: HIGHLIGHTER_FRAGMENTER,
    HighlighterEncoder: HIGHLIGHTER_ENCODER,
    BoundaryScanner: BOUNDARY_SCANNER,
    HighlighterOrder: HIGHLIGHTER_ORDER,
    HighlighterTagsSchema: HIGHLIGHTER_TAGS_SCHEMA,
    ZeroTermsQuery: ZERO_TERMS_QUERY,
    Operator: OPERATOR,
}


def native_value(value: IntEnum | None) -> str | None:
    """Translate a domain enum member to the engine value.

    Args:
        value: Domain enum member, or ``None`` when unset.

    Returns:
        Engine string value, or ``None`` when ``value`` is unset.

    Raises:
        KeyError: If the enum type has no translation table.
    """
    if value is None:
        return None
    table = NATIVE_TABLES[type(value)]
    return table[int(value)]
