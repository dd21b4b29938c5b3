"""Search data models."""

from collections.abc import Hashable
from dataclasses import dataclass


@dataclass(slots=True)
class Posting:
    """A posting records how often a term occurs in one field of a document.

    Postings are mutated in place while a document is being indexed (the
    frequency grows as occurrences are merged) and are read-only afterwards.
    """

    doc_key: int
    frequency: int = 0


@dataclass(frozen=True)
class SearchResult:
    """A ranked hit, keyed by the caller's document id."""

    doc_id: Hashable
    score: float


@dataclass(frozen=True)
class VacuumReport:
    """Outcome of a vacuum pass."""

    documents_purged: int
    postings_removed: int
    terms_pruned: int

    @property
    def is_noop(self) -> bool:
        return not (self.documents_purged or self.postings_removed or self.terms_pruned)
