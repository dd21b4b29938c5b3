"""Inverted index aggregate plus the removal/vacuum lifecycle.

Removal is lazy: ``remove_document`` only tombstones the document key.
``vacuum_index`` later purges tombstoned postings, drops the keys from the
registry and brings the field statistics back in line with live documents.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
import logging

from embedded_search.search.models import VacuumReport
from embedded_search.search.postings import PostingsStore
from embedded_search.search.registry import DocumentRegistry
from embedded_search.search.stats import FieldStatistics
from embedded_search.search.term_dictionary import TermDictionary


logger = logging.getLogger(__name__)


@dataclass
class InvertedIndex:
    """All mutable index state, owned exclusively by one index instance."""

    dictionary: TermDictionary
    postings: PostingsStore
    fields: FieldStatistics
    registry: DocumentRegistry = field(default_factory=DocumentRegistry)

    @property
    def size(self) -> int:
        """Live document count; reflects removals before vacuum."""
        return self.registry.live_count

    @property
    def field_count(self) -> int:
        return len(self.fields)

    def add_field(self) -> int:
        return self.fields.add_field()


def create_index(field_count: int = 0) -> InvertedIndex:
    """Return an empty index with ``field_count`` statistics slots."""
    dictionary = TermDictionary()
    return InvertedIndex(
        dictionary=dictionary,
        postings=PostingsStore(dictionary),
        fields=FieldStatistics(field_count),
    )


def remove_document(index: InvertedIndex, document_id: Hashable) -> int:
    """Tombstone ``document_id``; postings are left untouched until vacuum."""
    doc_key = index.registry.tombstone(document_id)
    logger.debug("Tombstoned document %r (key %d)", document_id, doc_key)
    return doc_key


def vacuum_index(index: InvertedIndex) -> VacuumReport:
    """Physically purge tombstoned documents and restore exact statistics.

    Running it on an index without tombstones changes nothing.
    """
    registry = index.registry
    tombstones = registry.tombstones
    if not tombstones:
        return VacuumReport(documents_purged=0, postings_removed=0, terms_pruned=0)

    pending = registry.pending_lengths()
    result = index.postings.purge(tombstones)
    purged = registry.purge()
    index.fields.subtract_lengths(pending, registry.live_count)

    logger.info(
        "Vacuumed %d documents: %d postings removed, %d terms pruned",
        len(purged),
        result.postings_removed,
        result.terms_pruned,
    )
    return VacuumReport(
        documents_purged=len(purged),
        postings_removed=result.postings_removed,
        terms_pruned=result.terms_pruned,
    )
