"""Postings storage on top of the term dictionary.

The store is append-only during indexing. Documents leave it only through
``purge``, which is driven by vacuum with the full tombstone set; search never
mutates postings.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
import logging

from embedded_search.search.models import Posting
from embedded_search.search.term_dictionary import TermDictionary


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurgeResult:
    """Counters reported by a purge pass."""

    postings_removed: int
    terms_pruned: int
    nodes_pruned: int


class PostingsStore:
    """Per term, per field postings lists kept in ascending document-key order."""

    def __init__(self, dictionary: TermDictionary | None = None) -> None:
        self.dictionary = dictionary if dictionary is not None else TermDictionary()

    def add_occurrence(self, term: str, field_index: int, doc_key: int, frequency: int = 1) -> Posting:
        """Count ``frequency`` more occurrences of ``term`` in ``field_index`` of ``doc_key``."""
        return self.dictionary.insert(term, field_index, doc_key, frequency)

    def get_postings(self, term: str, field_index: int) -> list[Posting]:
        """Return postings for a specific term in a field (empty when absent)."""
        node = self.dictionary.lookup(term)
        if node is None:
            return []
        return node.field_postings(field_index)

    def document_frequency(self, term: str, field_index: int, tombstones: Collection[int] = ()) -> int:
        """Number of documents outside ``tombstones`` containing ``term`` in the field."""
        return sum(1 for posting in self.get_postings(term, field_index) if posting.doc_key not in tombstones)

    def purge(self, tombstones: Collection[int]) -> PurgeResult:
        """Remove every posting that references a tombstoned key.

        Emptied postings lists are dropped and trie nodes left with neither
        postings nor children are pruned, so the dictionary shrinks with the
        store.
        """
        if not tombstones:
            return PurgeResult(postings_removed=0, terms_pruned=0, nodes_pruned=0)

        postings_removed = 0
        terms_pruned = 0
        for term, node in list(self.dictionary.iter_terms()):
            for field_index in list(node.postings):
                postings = node.postings[field_index]
                kept = [posting for posting in postings if posting.doc_key not in tombstones]
                if len(kept) == len(postings):
                    continue
                postings_removed += len(postings) - len(kept)
                if kept:
                    node.postings[field_index] = kept
                else:
                    del node.postings[field_index]
            if not node.postings:
                terms_pruned += 1
                logger.debug("Term %r has no remaining postings", term)

        nodes_pruned = self.dictionary.prune() if terms_pruned else 0
        return PurgeResult(
            postings_removed=postings_removed,
            terms_pruned=terms_pruned,
            nodes_pruned=nodes_pruned,
        )
