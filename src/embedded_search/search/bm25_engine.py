"""BM25 ranking over boosted fields with prefix expansion of query terms."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
import heapq

from embedded_search.search.inverted_index import InvertedIndex
from embedded_search.search.stats import bm25, calculate_idf, live_average_length


# Longer terms reached through prefix expansion are discounted to prefer exact matches
DEFAULT_EXPANSION_DISCOUNT = 0.5


@dataclass(frozen=True)
class RankedDocument:
    """Represents a scored document produced by the BM25 engine."""

    doc_key: int
    score: float


@dataclass(frozen=True)
class ExpandedTerm:
    """An indexed term reached from a query term, with its score multiplier."""

    term: str
    weight: float


class BM25SearchEngine:
    """Compute BM25 scores for query terms against an inverted index.

    Constants are fixed per engine instance; build another engine to rank
    with different ``k1``/``b`` values.
    """

    def __init__(
        self,
        *,
        k1: float = 1.2,
        b: float = 0.75,
        expansion_discount: float = DEFAULT_EXPANSION_DISCOUNT,
    ) -> None:
        if not 0.0 < expansion_discount < 1.0:
            raise ValueError(f"expansion_discount must lie strictly between 0 and 1, got {expansion_discount}")
        self.k1 = k1
        self.b = b
        self.expansion_discount = expansion_discount

    def expand(self, index: InvertedIndex, query_term: str) -> list[ExpandedTerm]:
        """Expand one filtered query term; the exact term keeps full weight."""
        return [
            ExpandedTerm(term, 1.0 if term == query_term else self.expansion_discount)
            for term in index.dictionary.expand(query_term)
        ]

    def score(
        self,
        index: InvertedIndex,
        field_boosts: Sequence[float],
        query_terms: Sequence[str],
    ) -> dict[int, float]:
        """Return the aggregate score of every matching live document.

        Duplicate query terms are scored independently. Tombstoned documents
        are excluded from ``N``, from each term's document frequency and from
        the average field lengths before any weight is computed.
        """
        registry = index.registry
        live_count = registry.live_count
        if not query_terms or live_count <= 0:
            return {}

        tombstones = registry.tombstones
        averages = [
            live_average_length(stats.sum_lengths, registry.tombstoned_length(field_index), live_count)
            for field_index, stats in enumerate(index.fields)
        ]
        doc_scores: dict[int, float] = defaultdict(float)

        for query_term in query_terms:
            for expanded in self.expand(index, query_term):
                node = index.dictionary.lookup(expanded.term)
                assert node is not None, f"expanded term {expanded.term!r} has no postings"
                for field_index, postings in node.postings.items():
                    boost = field_boosts[field_index]
                    if boost <= 0:
                        continue
                    live_postings = [posting for posting in postings if posting.doc_key not in tombstones]
                    if not live_postings:
                        continue

                    idf = calculate_idf(len(live_postings), live_count)
                    avg_length = averages[field_index]
                    for posting in live_postings:
                        assert registry.is_registered(posting.doc_key), (
                            f"posting for {expanded.term!r} references unknown key {posting.doc_key}"
                        )
                        doc_length = registry.field_length(posting.doc_key, field_index)
                        weight = bm25(posting.frequency, doc_length, avg_length, k1=self.k1, b=self.b)
                        doc_scores[posting.doc_key] += boost * idf * weight * expanded.weight

        return doc_scores

    def rank(
        self,
        index: InvertedIndex,
        field_boosts: Sequence[float],
        query_terms: Sequence[str],
        *,
        limit: int | None = None,
    ) -> list[RankedDocument]:
        """Return matches by descending score, ties broken by ascending key."""
        if limit is not None and limit <= 0:
            return []

        doc_scores = self.score(index, field_boosts, query_terms)
        candidates = [(doc_key, score) for doc_key, score in doc_scores.items() if score > 0]

        def order(item: tuple[int, float]) -> tuple[float, int]:
            return (-item[1], item[0])

        if limit is not None and limit < len(candidates):
            top_items = heapq.nsmallest(limit, candidates, key=order)
        else:
            top_items = sorted(candidates, key=order)
        return [RankedDocument(doc_key=doc_key, score=score) for doc_key, score in top_items]
