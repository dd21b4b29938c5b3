"""Tests for field statistics and BM25 helpers."""

import math

import pytest

from embedded_search.search.stats import (
    FieldStatistics,
    FieldStats,
    bm25,
    calculate_idf,
    live_average_length,
)


class TestCalculateIdf:
    def test_matches_bm25_formula(self):
        assert calculate_idf(2, 2) == pytest.approx(math.log(1 + 0.5 / 2.5))
        assert calculate_idf(1, 10) == pytest.approx(math.log(1 + 9.5 / 1.5))

    def test_is_positive_for_terms_in_every_document(self):
        assert calculate_idf(100, 100) > 0

    def test_rarer_terms_have_higher_idf(self):
        assert calculate_idf(1, 100) > calculate_idf(10, 100) > calculate_idf(50, 100)

    def test_empty_collection_yields_zero(self):
        assert calculate_idf(0, 0) == 0.0


class TestBm25:
    def test_weight_for_known_values(self):
        assert bm25(1, 2, 2.5) == pytest.approx(2.2 / (1 + 1.2 * (0.25 + 0.75 * 0.8)))

    def test_zero_frequency_yields_zero(self):
        assert bm25(0, 10, 5.0) == 0.0

    def test_shorter_documents_score_higher(self):
        assert bm25(1, 2, 2.5) > bm25(1, 3, 2.5)

    def test_weight_grows_with_frequency_and_saturates(self):
        weights = [bm25(tf, 10, 10.0) for tf in range(1, 50)]
        assert weights == sorted(weights)
        assert weights[-1] < 1.2 + 1

    def test_b_zero_disables_length_normalization(self):
        assert bm25(2, 1, 10.0, b=0.0) == pytest.approx(bm25(2, 100, 10.0, b=0.0))

    def test_zero_average_does_not_divide_by_zero(self):
        assert bm25(1, 0, 0.0) == pytest.approx(2.2 / (1 + 1.2 * 0.25))


class TestFieldStatistics:
    def test_add_lengths_updates_sum_and_average(self):
        stats = FieldStatistics(2)
        stats.add_lengths([3, 1], document_count=1)
        stats.add_lengths([2, 0], document_count=2)
        assert stats[0] == FieldStats(sum_lengths=5, avg_length=2.5)
        assert stats[1] == FieldStats(sum_lengths=1, avg_length=0.5)

    def test_subtract_lengths(self):
        stats = FieldStatistics(1)
        stats.add_lengths([3], document_count=1)
        stats.add_lengths([2], document_count=2)
        stats.subtract_lengths({0: 3}, document_count=1)
        assert stats[0] == FieldStats(sum_lengths=2, avg_length=2.0)

    def test_average_is_zero_without_documents(self):
        stats = FieldStatistics(1)
        stats.add_lengths([4], document_count=1)
        stats.subtract_lengths({0: 4}, document_count=0)
        assert stats[0] == FieldStats(sum_lengths=0, avg_length=0.0)

    def test_add_field_appends_slot(self):
        stats = FieldStatistics()
        assert stats.add_field() == 0
        assert stats.add_field() == 1
        assert len(stats) == 2

    def test_snapshot_is_detached(self):
        stats = FieldStatistics(1)
        snapshot = stats.snapshot()
        stats.add_lengths([7], document_count=1)
        assert snapshot[0].sum_lengths == 0

    def test_negative_field_count_rejected(self):
        with pytest.raises(ValueError):
            FieldStatistics(-1)


def test_live_average_length_excludes_tombstoned_lengths():
    assert live_average_length(5, 3, 1) == 2.0
    assert live_average_length(5, 0, 2) == 2.5
    assert live_average_length(5, 5, 0) == 0.0
