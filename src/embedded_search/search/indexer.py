"""Indexing pipeline: turns one document into postings and length statistics."""

from __future__ import annotations

from collections import Counter
from collections.abc import Hashable, Sequence
import logging
from typing import Any

from embedded_search.search.analyzers import FieldGetter, TermFilter, Tokenizer, analyze
from embedded_search.search.inverted_index import InvertedIndex


logger = logging.getLogger(__name__)


def _field_text(getter: FieldGetter, document: Any) -> str:
    value = getter(document)
    if value is None:
        return ""
    if not isinstance(value, str):
        return str(value)
    return value


def index_document(
    index: InvertedIndex,
    getters: Sequence[FieldGetter],
    tokenizer: Tokenizer,
    term_filter: TermFilter,
    document_id: Hashable,
    document: Any,
) -> int:
    """Index ``document`` under ``document_id`` and return its new key.

    Every field is analyzed before any index state changes, so a failing
    getter, tokenizer or filter leaves the index untouched. The field length
    counts the terms that survived filtering.
    """
    assert len(getters) == index.field_count, "one getter per registered field"
    index.registry.ensure_available(document_id)

    field_terms: list[Counter[str]] = []
    lengths: list[int] = []
    for getter in getters:
        terms = analyze(_field_text(getter, document), tokenizer, term_filter)
        field_terms.append(Counter(terms))
        lengths.append(len(terms))

    doc_key = index.registry.register(document_id, lengths)
    for field_index, counts in enumerate(field_terms):
        for term, frequency in counts.items():
            index.postings.add_occurrence(term, field_index, doc_key, frequency)
    index.fields.add_lengths(lengths, index.registry.live_count)

    logger.debug("Indexed document %r as key %d (field lengths %s)", document_id, doc_key, lengths)
    return doc_key
