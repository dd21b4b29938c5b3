"""Field length statistics and BM25 term weighting.

``FieldStatistics`` keeps one running entry per registered field. Entries are
recomputed on ``add`` and ``vacuum`` only: between ``remove`` and ``vacuum``
the sums still include tombstoned documents. Ranking corrects for that itself
through ``live_average_length``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, replace
import math


@dataclass(slots=True)
class FieldStats:
    """Aggregated length statistics for a field."""

    sum_lengths: int = 0
    avg_length: float = 0.0


class FieldStatistics:
    """Growable array of ``FieldStats``, indexed by field registration order.

    ``avg_length`` is always ``sum_lengths / live document count``. While
    removals await vacuum, ``sum_lengths`` still includes the removed
    documents but the divisor does not, so the average read between
    ``remove`` and ``vacuum`` overstates the live average. Ranking does not
    read it; use ``live_average_length`` for the exact live value.
    """

    def __init__(self, field_count: int = 0) -> None:
        if field_count < 0:
            raise ValueError(f"field_count must be >= 0, got {field_count}")
        self._entries: list[FieldStats] = [FieldStats() for _ in range(field_count)]

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, field_index: int) -> FieldStats:
        return self._entries[field_index]

    def __iter__(self) -> Iterator[FieldStats]:
        return iter(self._entries)

    def add_field(self) -> int:
        """Append an empty entry and return its field index."""
        self._entries.append(FieldStats())
        return len(self._entries) - 1

    def add_lengths(self, lengths: Sequence[int], document_count: int) -> None:
        """Account for a newly indexed document's per-field lengths."""
        assert len(lengths) == len(self._entries), "one length per registered field"
        for entry, length in zip(self._entries, lengths):
            entry.sum_lengths += length
        self.recompute(document_count)

    def subtract_lengths(self, lengths: Mapping[int, int], document_count: int) -> None:
        """Remove purged documents' lengths (field index -> total length)."""
        for field_index, length in lengths.items():
            entry = self._entries[field_index]
            entry.sum_lengths -= length
            assert entry.sum_lengths >= 0, f"field {field_index} length sum went negative"
        self.recompute(document_count)

    def recompute(self, document_count: int) -> None:
        for entry in self._entries:
            entry.avg_length = entry.sum_lengths / document_count if document_count > 0 else 0.0

    def snapshot(self) -> tuple[FieldStats, ...]:
        """Return detached copies safe to hand to callers."""
        return tuple(replace(entry) for entry in self._entries)


def live_average_length(sum_lengths: int, tombstoned_lengths: int, live_count: int) -> float:
    """Average field length over live documents only."""
    if live_count <= 0:
        return 0.0
    return max(sum_lengths - tombstoned_lengths, 0) / live_count


def calculate_idf(doc_freq: int, total_docs: int) -> float:
    """Return the BM25 inverse document frequency ``ln(1 + (N - n + 0.5) / (n + 0.5))``.

    The ``1 +`` inside the logarithm keeps the value positive even for terms
    present in every document.
    """

    if total_docs <= 0:
        return 0.0
    df = max(0, min(doc_freq, total_docs))
    return math.log(1.0 + (total_docs - df + 0.5) / (df + 0.5))


def bm25(tf: int, doc_length: int, avg_doc_length: float, *, k1: float = 1.2, b: float = 0.75) -> float:
    """Compute the BM25 term weight without IDF."""

    if tf <= 0:
        return 0.0
    length_ratio = doc_length / max(avg_doc_length, 1e-9)
    denominator = tf + k1 * (1 - b + b * length_ratio)
    return (tf * (k1 + 1)) / denominator
