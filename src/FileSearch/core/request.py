"""Structured search request model.

Every optional attribute uses ``None`` as the "unset" marker: an unset value
is left out of the compiled engine query so the engine default applies. A
value of ``0``, ``False`` or ``""`` is a real setting and is always sent.

Field references are ``FieldRef`` values resolved once per document type via
``FileSearch.core.fields.field_ref``.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

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
from FileSearch.core.fields import FieldRef

DEFAULT_TERM_SUGGEST_NAME = "termSuggest"
DEFAULT_COMPLETION_SUGGEST_NAME = "completionSuggest"
DEFAULT_PHRASE_SUGGEST_NAME = "phraseSuggest"


# Query


@dataclass(frozen=True, slots=True)
class MatchQuerySpec:
    """Full-text ``match`` query on one field."""

    field: Optional[FieldRef] = None
    text: Optional[str] = None
    analyzer: Optional[str] = None
    auto_generate_synonyms_phrase_query: Optional[bool] = None
    fuzzy_transpositions: Optional[bool] = None
    lenient: Optional[bool] = None
    max_expansions: Optional[int] = None
    operator: Optional[Operator] = None
    prefix_length: Optional[int] = None
    zero_terms_query: Optional[ZeroTermsQuery] = None


@dataclass(frozen=True, slots=True)
class QuerySpec:
    """Query section of a request. ``match`` is the only supported form."""

    match: Optional[MatchQuerySpec] = None


def match_query(field: FieldRef, text: str, **options: Any) -> QuerySpec:
    """Build a ``QuerySpec`` holding one match query.

    Args:
        field: Canonical field reference.
        text: Query text.
        **options: Optional ``MatchQuerySpec`` tuning parameters.

    Returns:
        Immutable query spec.
    """
    return QuerySpec(match=MatchQuerySpec(field=field, text=text, **options))


# Highlight


@dataclass(frozen=True, slots=True)
class HighlightFieldSpec:
    """Per-field highlight settings overriding the global ones."""

    field: Optional[FieldRef] = None
    type: Optional[HighlighterType] = None
    force_source: Optional[bool] = None
    number_of_fragments: Optional[int] = None
    no_match_size: Optional[int] = None
    boundary_chars: Optional[str] = None
    boundary_max_scan: Optional[int] = None
    boundary_scanner: Optional[BoundaryScanner] = None
    boundary_scanner_locale: Optional[str] = None
    fragmenter: Optional[HighlighterFragmenter] = None
    fragment_offset: Optional[int] = None
    fragment_size: Optional[int] = None
    max_fragment_length: Optional[int] = None
    phrase_limit: Optional[int] = None
    query: Optional[QuerySpec] = None
    order: Optional[HighlighterOrder] = None
    pre_tag: Optional[str] = None
    post_tag: Optional[str] = None
    require_field_match: Optional[bool] = None
    tags_schema: Optional[HighlighterTagsSchema] = None


@dataclass(frozen=True, slots=True)
class HighlightSpec:
    """Global highlight settings plus ordered per-field overrides."""

    pre_tag: Optional[str] = None
    post_tag: Optional[str] = None
    highlight_query: Optional[QuerySpec] = None
    encoder: Optional[HighlighterEncoder] = None
    boundary_chars: Optional[str] = None
    boundary_max_scan: Optional[int] = None
    boundary_scanner: Optional[BoundaryScanner] = None
    boundary_scanner_locale: Optional[str] = None
    fragmenter: Optional[HighlighterFragmenter] = None
    fragment_offset: Optional[int] = None
    fragment_size: Optional[int] = None
    max_analyzed_offset: Optional[int] = None
    max_fragment_length: Optional[int] = None
    no_match_size: Optional[int] = None
    number_of_fragments: Optional[int] = None
    order: Optional[HighlighterOrder] = None
    require_field_match: Optional[bool] = None
    tags_schema: Optional[HighlighterTagsSchema] = None
    fields: Sequence[HighlightFieldSpec] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields or ()))


# Term suggester


@dataclass(frozen=True, slots=True)
class TermSuggest:
    """Per-term spelling correction suggester."""

    name: Optional[str] = None
    text: Optional[str] = None
    field: Optional[FieldRef] = None
    analyzer: Optional[str] = None
    lowercase_terms: Optional[bool] = None
    max_edits: Optional[int] = None
    max_inspections: Optional[int] = None
    max_term_frequency: Optional[float] = None
    min_doc_frequency: Optional[float] = None
    min_word_length: Optional[int] = None
    prefix_length: Optional[int] = None
    shard_size: Optional[int] = None
    size: Optional[int] = None
    sort: Optional[SuggestSort] = None
    string_distance: Optional[StringDistance] = None
    suggest_mode: Optional[SuggestMode] = None


# Completion suggester


@dataclass(frozen=True, slots=True)
class Fuzziness:
    """Allowed edit distance for fuzzy completion.

    Exactly one form is set: ``AUTO`` (optionally with ``low``/``high``
    bounds), a fixed edit distance, or a ratio. Use the class constructors.
    """

    auto: bool = False
    low: Optional[int] = None
    high: Optional[int] = None
    edit_distance: Optional[int] = None
    ratio: Optional[float] = None

    @classmethod
    def automatic(cls, low: int | None = None, high: int | None = None) -> Fuzziness:
        return cls(auto=True, low=low, high=high)

    @classmethod
    def fixed(cls, edit_distance: int) -> Fuzziness:
        return cls(edit_distance=edit_distance)

    @classmethod
    def from_ratio(cls, ratio: float) -> Fuzziness:
        return cls(ratio=ratio)


@dataclass(frozen=True, slots=True)
class CompletionFuzzy:
    """Fuzzy matching options of a completion suggester."""

    fuzziness: Optional[Fuzziness] = None
    min_length: Optional[int] = None
    prefix_length: Optional[int] = None
    transpositions: Optional[bool] = None
    unicode_aware: Optional[bool] = None


@dataclass(frozen=True, slots=True)
class CompletionContext:
    """One context filter applied to a completion suggester.

    Attributes:
        name: Context mapping name declared on the completion field.
        context: Category value or geohash to filter by.
        boost: Score multiplier for matching suggestions.
        prefix: Whether ``context`` is treated as a prefix.
        precision: Geohash precision (geo contexts only).
    """

    name: str
    context: Optional[str] = None
    boost: Optional[float] = None
    prefix: Optional[bool] = None
    precision: Optional[int] = None


@dataclass(frozen=True, slots=True)
class CompletionSuggest:
    """Prefix or regex based completion suggester."""

    name: Optional[str] = None
    field: Optional[FieldRef] = None
    prefix: Optional[str] = None
    regex: Optional[str] = None
    analyzer: Optional[str] = None
    size: Optional[int] = None
    skip_duplicates: Optional[bool] = None
    fuzzy: Optional[CompletionFuzzy] = None
    contexts: Sequence[CompletionContext] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "contexts", tuple(self.contexts or ()))


# Phrase suggester


@dataclass(frozen=True, slots=True)
class PhraseCollateQuery:
    """Stored script id or inline template source used to collate candidates."""

    id: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PhraseCollate:
    """Collation of phrase candidates against a templated query."""

    query: Optional[PhraseCollateQuery] = None
    params: Optional[Mapping[str, Any]] = None
    prune: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.params is not None:
            object.__setattr__(self, "params", MappingProxyType(dict(self.params)))


@dataclass(frozen=True, slots=True)
class PhraseDirectGenerator:
    """Candidate generator override for a phrase suggester."""

    field: Optional[FieldRef] = None
    max_edits: Optional[int] = None
    max_inspections: Optional[float] = None
    max_term_frequency: Optional[float] = None
    min_doc_frequency: Optional[float] = None
    min_word_length: Optional[int] = None
    prefix_length: Optional[int] = None
    pre_filter: Optional[str] = None
    post_filter: Optional[str] = None
    size: Optional[int] = None
    suggest_mode: Optional[SuggestMode] = None


@dataclass(frozen=True, slots=True)
class PhraseHighlight:
    pre_tag: Optional[str] = None
    post_tag: Optional[str] = None


@dataclass(frozen=True, slots=True)
class LaplaceSmoothing:
    alpha: Optional[float] = None


@dataclass(frozen=True, slots=True)
class LinearInterpolationSmoothing:
    trigram_lambda: Optional[float] = None
    bigram_lambda: Optional[float] = None
    unigram_lambda: Optional[float] = None


@dataclass(frozen=True, slots=True)
class StupidBackoffSmoothing:
    discount: Optional[float] = None


@dataclass(frozen=True, slots=True)
class PhraseSmoothing:
    """Smoothing model of a phrase suggester; at most one model may be set."""

    laplace: Optional[LaplaceSmoothing] = None
    linear_interpolation: Optional[LinearInterpolationSmoothing] = None
    stupid_backoff: Optional[StupidBackoffSmoothing] = None

    def __post_init__(self) -> None:
        chosen = [m for m in (self.laplace, self.linear_interpolation, self.stupid_backoff) if m is not None]
        if len(chosen) > 1:
            raise ValueError("PhraseSmoothing accepts only one smoothing model")


@dataclass(frozen=True, slots=True)
class PhraseSuggest:
    """N-gram based phrase correction suggester."""

    name: Optional[str] = None
    text: Optional[str] = None
    field: Optional[FieldRef] = None
    analyzer: Optional[str] = None
    size: Optional[int] = None
    shard_size: Optional[int] = None
    confidence: Optional[float] = None
    force_unigrams: Optional[bool] = None
    gram_size: Optional[int] = None
    max_errors: Optional[float] = None
    real_word_error_likelihood: Optional[float] = None
    separator: Optional[str] = None
    token_limit: Optional[int] = None
    collate: Optional[PhraseCollate] = None
    direct_generator: Optional[PhraseDirectGenerator] = None
    highlight: Optional[PhraseHighlight] = None
    smoothing: Optional[PhraseSmoothing] = None


# Root


@dataclass(frozen=True, slots=True)
class SuggestSpec:
    """Up to one suggester of each kind."""

    term: Optional[TermSuggest] = None
    completion: Optional[CompletionSuggest] = None
    phrase: Optional[PhraseSuggest] = None


@dataclass(frozen=True, slots=True)
class RequestSpec:
    """Root of a search request; unset sections are left out entirely."""

    query: Optional[QuerySpec] = None
    highlight: Optional[HighlightSpec] = None
    suggest: Optional[SuggestSpec] = None
