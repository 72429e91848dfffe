"""Request compiler: ``RequestSpec`` to engine query DSL.

Pure translation with no I/O. Unset values never reach the output, so the
engine default applies to everything the caller did not configure.
"""

from __future__ import annotations

from typing import Any

from FileSearch.core.fields import FieldRef
from FileSearch.core.request import (
    DEFAULT_COMPLETION_SUGGEST_NAME,
    DEFAULT_PHRASE_SUGGEST_NAME,
    DEFAULT_TERM_SUGGEST_NAME,
    CompletionContext,
    CompletionFuzzy,
    CompletionSuggest,
    Fuzziness,
    HighlightFieldSpec,
    HighlightSpec,
    PhraseCollate,
    PhraseDirectGenerator,
    PhraseHighlight,
    PhraseSmoothing,
    PhraseSuggest,
    QuerySpec,
    RequestSpec,
    SuggestSpec,
    TermSuggest,
)
from FileSearch.engine.enums import native_value

# Smoothing block used when a phrase suggester has no model configured: the
# engine's default model with its default discount.
DEFAULT_SMOOTHING: dict[str, dict[str, Any]] = {"stupid_backoff": {}}


def compile_request(spec: RequestSpec) -> dict[str, Any]:
    """Compile a request spec into an engine ``_search`` body.

    Args:
        spec: Structured request.

    Returns:
        Search body holding only the ``query``, ``highlight`` and ``suggest``
        sections that are set on ``spec``.
    """
    body: dict[str, Any] = {}
    if spec.query is not None:
        body["query"] = compile_query(spec.query)
    if spec.highlight is not None:
        body["highlight"] = compile_highlight(spec.highlight)
    if spec.suggest is not None:
        body["suggest"] = compile_suggest(spec.suggest)
    return body


# Query


def compile_query(query: QuerySpec) -> dict[str, Any]:
    """Compile the query section into a ``match`` clause.

    A match spec without a field compiles to an empty ``match`` object, which
    the engine rejects at execution time.
    """
    match = query.match
    if match is None or match.field is None:
        return {"match": {}}

    params: dict[str, Any] = {}
    _put(params, "query", match.text)
    _put(params, "analyzer", match.analyzer)
    _put(params, "auto_generate_synonyms_phrase_query", match.auto_generate_synonyms_phrase_query)
    _put(params, "fuzzy_transpositions", match.fuzzy_transpositions)
    _put(params, "lenient", match.lenient)
    _put(params, "max_expansions", match.max_expansions)
    _put(params, "operator", native_value(match.operator))
    _put(params, "prefix_length", match.prefix_length)
    _put(params, "zero_terms_query", native_value(match.zero_terms_query))
    return {"match": {_path(match.field): params}}


# Highlight


def compile_highlight(highlight: HighlightSpec) -> dict[str, Any]:
    """Compile global highlight settings followed by per-field overrides.

    Field overrides without a field are skipped; the others keep caller order
    and are emitted as a list of single-field objects.
    """
    out: dict[str, Any] = {}
    _put_tags(out, pre_tag=highlight.pre_tag, post_tag=highlight.post_tag)
    _put(out, "encoder", native_value(highlight.encoder))
    _put(out, "boundary_chars", highlight.boundary_chars)
    _put(out, "boundary_max_scan", highlight.boundary_max_scan)
    _put(out, "boundary_scanner", native_value(highlight.boundary_scanner))
    _put(out, "boundary_scanner_locale", highlight.boundary_scanner_locale)
    _put(out, "fragmenter", native_value(highlight.fragmenter))
    _put(out, "fragment_offset", highlight.fragment_offset)
    _put(out, "fragment_size", highlight.fragment_size)
    if highlight.highlight_query is not None:
        out["highlight_query"] = compile_query(highlight.highlight_query)
    _put(out, "max_analyzed_offset", highlight.max_analyzed_offset)
    _put(out, "max_fragment_length", highlight.max_fragment_length)
    _put(out, "no_match_size", highlight.no_match_size)
    _put(out, "number_of_fragments", highlight.number_of_fragments)
    _put(out, "order", native_value(highlight.order))
    _put(out, "require_field_match", highlight.require_field_match)
    _put(out, "tags_schema", native_value(highlight.tags_schema))

    fields = [
        {_path(field_spec.field): _compile_highlight_field(field_spec)}
        for field_spec in highlight.fields
        if field_spec.field is not None
    ]
    if fields:
        out["fields"] = fields
    return out


def _compile_highlight_field(field_spec: HighlightFieldSpec) -> dict[str, Any]:
    """Compile one per-field highlight override."""
    out: dict[str, Any] = {}
    _put(out, "type", native_value(field_spec.type))
    _put(out, "fragmenter", native_value(field_spec.fragmenter))
    _put(out, "force_source", field_spec.force_source)
    _put(out, "fragment_size", field_spec.fragment_size)
    _put(out, "number_of_fragments", field_spec.number_of_fragments)
    _put(out, "no_match_size", field_spec.no_match_size)
    _put(out, "boundary_max_scan", field_spec.boundary_max_scan)
    _put(out, "phrase_limit", field_spec.phrase_limit)
    if field_spec.query is not None:
        out["highlight_query"] = compile_query(field_spec.query)
    _put(out, "boundary_chars", field_spec.boundary_chars)
    _put(out, "boundary_scanner", native_value(field_spec.boundary_scanner))
    _put(out, "boundary_scanner_locale", field_spec.boundary_scanner_locale)
    _put(out, "fragment_offset", field_spec.fragment_offset)
    _put(out, "max_fragment_length", field_spec.max_fragment_length)
    _put(out, "order", native_value(field_spec.order))
    _put_tags(out, pre_tag=field_spec.pre_tag, post_tag=field_spec.post_tag)
    _put(out, "require_field_match", field_spec.require_field_match)
    _put(out, "tags_schema", native_value(field_spec.tags_schema))
    return out


# Suggest


def compile_suggest(suggest: SuggestSpec) -> dict[str, Any]:
    """Compile configured suggesters, keyed by name or by the kind's default name."""
    out: dict[str, Any] = {}
    if suggest.term is not None:
        out[suggest.term.name or DEFAULT_TERM_SUGGEST_NAME] = _compile_term(suggest.term)
    if suggest.completion is not None:
        out[suggest.completion.name or DEFAULT_COMPLETION_SUGGEST_NAME] = _compile_completion(suggest.completion)
    if suggest.phrase is not None:
        out[suggest.phrase.name or DEFAULT_PHRASE_SUGGEST_NAME] = _compile_phrase(suggest.phrase)
    return out


def _compile_term(term: TermSuggest) -> dict[str, Any]:
    body: dict[str, Any] = {}
    _put(body, "field", _path(term.field))
    _put(body, "analyzer", term.analyzer)
    _put(body, "size", term.size)
    _put(body, "shard_size", term.shard_size)
    _put(body, "lowercase_terms", term.lowercase_terms)
    _put(body, "max_edits", term.max_edits)
    _put(body, "max_inspections", term.max_inspections)
    _put(body, "max_term_freq", term.max_term_frequency)
    _put(body, "min_doc_freq", term.min_doc_frequency)
    _put(body, "min_word_length", term.min_word_length)
    _put(body, "prefix_length", term.prefix_length)
    _put(body, "sort", native_value(term.sort))
    _put(body, "string_distance", native_value(term.string_distance))
    _put(body, "suggest_mode", native_value(term.suggest_mode))

    out: dict[str, Any] = {}
    _put(out, "text", term.text)
    out["term"] = body
    return out


def _compile_completion(completion: CompletionSuggest) -> dict[str, Any]:
    body: dict[str, Any] = {}
    _put(body, "field", _path(completion.field))
    _put(body, "analyzer", completion.analyzer)
    _put(body, "size", completion.size)
    _put(body, "skip_duplicates", completion.skip_duplicates)
    if completion.fuzzy is not None:
        body["fuzzy"] = _compile_fuzzy(completion.fuzzy)

    contexts: dict[str, list[dict[str, Any]]] = {}
    for context in completion.contexts:
        contexts.setdefault(context.name, []).append(_compile_context(context))
    if contexts:
        body["contexts"] = contexts

    out: dict[str, Any] = {}
    _put(out, "prefix", completion.prefix)
    _put(out, "regex", completion.regex)
    out["completion"] = body
    return out


def _compile_fuzzy(fuzzy: CompletionFuzzy) -> dict[str, Any]:
    out: dict[str, Any] = {}
    _put(out, "fuzziness", _compile_fuzziness(fuzzy.fuzziness))
    _put(out, "min_length", fuzzy.min_length)
    _put(out, "prefix_length", fuzzy.prefix_length)
    _put(out, "transpositions", fuzzy.transpositions)
    _put(out, "unicode_aware", fuzzy.unicode_aware)
    return out


def _compile_fuzziness(fuzziness: Fuzziness | None) -> Any:
    """Render fuzziness as ``AUTO``, ``AUTO:low,high``, an edit distance or a ratio."""
    if fuzziness is None:
        return None
    if fuzziness.auto:
        if fuzziness.low is not None and fuzziness.high is not None:
            return f"AUTO:{fuzziness.low},{fuzziness.high}"
        return "AUTO"
    if fuzziness.edit_distance is not None:
        return fuzziness.edit_distance
    if fuzziness.ratio is not None:
        return fuzziness.ratio
    return None


def _compile_context(context: CompletionContext) -> dict[str, Any]:
    out: dict[str, Any] = {}
    _put(out, "context", context.context)
    _put(out, "boost", context.boost)
    _put(out, "prefix", context.prefix)
    _put(out, "precision", context.precision)
    return out


def _compile_phrase(phrase: PhraseSuggest) -> dict[str, Any]:
    body: dict[str, Any] = {}
    _put(body, "field", _path(phrase.field))
    _put(body, "analyzer", phrase.analyzer)
    _put(body, "size", phrase.size)
    _put(body, "shard_size", phrase.shard_size)
    _put(body, "confidence", phrase.confidence)
    _put(body, "force_unigrams", phrase.force_unigrams)
    _put(body, "gram_size", phrase.gram_size)
    _put(body, "max_errors", phrase.max_errors)
    _put(body, "real_word_error_likelihood", phrase.real_word_error_likelihood)
    _put(body, "separator", phrase.separator)
    _put(body, "token_limit", phrase.token_limit)
    if phrase.collate is not None:
        body["collate"] = _compile_collate(phrase.collate)
    if phrase.direct_generator is not None:
        body["direct_generator"] = [_compile_direct_generator(phrase.direct_generator)]
    if phrase.highlight is not None:
        body["highlight"] = _compile_phrase_highlight(phrase.highlight)
    body["smoothing"] = _compile_smoothing(phrase.smoothing)

    out: dict[str, Any] = {}
    _put(out, "text", phrase.text)
    out["phrase"] = body
    return out


def _compile_collate(collate: PhraseCollate) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if collate.query is not None:
        query: dict[str, Any] = {}
        _put(query, "id", collate.query.id)
        _put(query, "source", collate.query.source)
        out["query"] = query
    if collate.params is not None:
        out["params"] = dict(collate.params)
    _put(out, "prune", collate.prune)
    return out


def _compile_direct_generator(generator: PhraseDirectGenerator) -> dict[str, Any]:
    out: dict[str, Any] = {}
    _put(out, "field", _path(generator.field))
    _put(out, "max_edits", generator.max_edits)
    _put(out, "max_inspections", generator.max_inspections)
    _put(out, "max_term_freq", generator.max_term_frequency)
    _put(out, "min_doc_freq", generator.min_doc_frequency)
    _put(out, "min_word_length", generator.min_word_length)
    _put(out, "prefix_length", generator.prefix_length)
    _put(out, "pre_filter", generator.pre_filter)
    _put(out, "post_filter", generator.post_filter)
    _put(out, "size", generator.size)
    _put(out, "suggest_mode", native_value(generator.suggest_mode))
    return out


def _compile_phrase_highlight(highlight: PhraseHighlight) -> dict[str, Any]:
    out: dict[str, Any] = {}
    _put(out, "pre_tag", highlight.pre_tag)
    _put(out, "post_tag", highlight.post_tag)
    return out


def _compile_smoothing(smoothing: PhraseSmoothing | None) -> dict[str, Any]:
    """Compile exactly one smoothing model.

    The configured model is emitted even when it carries no values; with no
    model configured the default block is emitted instead of dropping
    smoothing.
    """
    if smoothing is None:
        return _default_smoothing()

    if smoothing.laplace is not None:
        laplace: dict[str, Any] = {}
        _put(laplace, "alpha", smoothing.laplace.alpha)
        return {"laplace": laplace}

    if smoothing.linear_interpolation is not None:
        linear: dict[str, Any] = {}
        _put(linear, "trigram_lambda", smoothing.linear_interpolation.trigram_lambda)
        _put(linear, "bigram_lambda", smoothing.linear_interpolation.bigram_lambda)
        _put(linear, "unigram_lambda", smoothing.linear_interpolation.unigram_lambda)
        return {"linear": linear}

    if smoothing.stupid_backoff is not None:
        backoff: dict[str, Any] = {}
        _put(backoff, "discount", smoothing.stupid_backoff.discount)
        return {"stupid_backoff": backoff}

    return _default_smoothing()


def _default_smoothing() -> dict[str, Any]:
    return {name: dict(params) for name, params in DEFAULT_SMOOTHING.items()}


# Helpers


def _put(target: dict[str, Any], key: str, value: Any) -> None:
    """Set ``target[key]`` unless ``value`` is unset."""
    if value is None:
        return
    target[key] = value


def _put_tags(target: dict[str, Any], *, pre_tag: str | None, post_tag: str | None) -> None:
    """Set highlight tag lists; the engine expects arrays."""
    if pre_tag is not None:
        target["pre_tags"] = [pre_tag]
    if post_tag is not None:
        target["post_tags"] = [post_tag]


def _path(field: FieldRef | None) -> str | None:
    return field.path if field is not None else None
