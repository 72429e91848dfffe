"""Domain enums used by the request model.

Member values are fixed ordinals. The engine-side tables in
``FileSearch.engine.enums`` are indexed by these values, so members must never
be reordered or renumbered.
"""

from __future__ import annotations

from enum import IntEnum


class SuggestMode(IntEnum):
    MISSING = 0
    POPULAR = 1
    ALWAYS = 2


class StringDistance(IntEnum):
    INTERNAL = 0
    DAMERAU_LEVENSHTEIN = 1
    LEVENSHTEIN = 2
    JARO_WINKLER = 3
    NGRAM = 4


class SuggestSort(IntEnum):
    SCORE = 0
    FREQUENCY = 1


class HighlighterType(IntEnum):
    PLAIN = 0
    FVH = 1
    UNIFIED = 2


class HighlighterFragmenter(IntEnum):
    SIMPLE = 0
    SPAN = 1


class HighlighterEncoder(IntEnum):
    DEFAULT = 0
    HTML = 1


class BoundaryScanner(IntEnum):
    CHARACTERS = 0
    SENTENCE = 1
    WORD = 2


class HighlighterOrder(IntEnum):
    SCORE = 0


class HighlighterTagsSchema(IntEnum):
    STYLED = 0


class ZeroTermsQuery(IntEnum):
    ALL = 0
    NONE = 1


class Operator(IntEnum):
    AND = 0
    OR = 1
