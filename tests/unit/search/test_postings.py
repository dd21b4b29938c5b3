"""Tests for the postings store."""

from embedded_search.search.postings import PostingsStore


def _pairs(postings):
    return [(posting.doc_key, posting.frequency) for posting in postings]


def test_add_occurrence_counts_and_orders_by_key():
    store = PostingsStore()
    store.add_occurrence("lorem", 0, 0)
    store.add_occurrence("lorem", 0, 0)
    store.add_occurrence("lorem", 0, 2)
    store.add_occurrence("lorem", 0, 5, frequency=3)

    assert _pairs(store.get_postings("lorem", 0)) == [(0, 2), (2, 1), (5, 3)]


def test_get_postings_for_missing_term_or_field():
    store = PostingsStore()
    store.add_occurrence("lorem", 0, 0)
    assert store.get_postings("ipsum", 0) == []
    assert store.get_postings("lorem", 1) == []


def test_document_frequency_skips_tombstones():
    store = PostingsStore()
    for key in range(4):
        store.add_occurrence("lorem", 0, key)
    assert store.document_frequency("lorem", 0) == 4
    assert store.document_frequency("lorem", 0, {1, 3}) == 2


def test_purge_removes_tombstoned_postings_and_empty_terms():
    store = PostingsStore()
    store.add_occurrence("lorem", 0, 0)
    store.add_occurrence("lorem", 0, 1)
    store.add_occurrence("dolor", 0, 0)
    store.add_occurrence("dolor", 1, 0)
    store.add_occurrence("ipsum", 1, 1)

    result = store.purge({0})

    assert result.postings_removed == 3
    assert result.terms_pruned == 1
    assert result.nodes_pruned == len("dolor")
    assert _pairs(store.get_postings("lorem", 0)) == [(1, 1)]
    assert store.dictionary.lookup("dolor") is None
    assert store.dictionary.expand("d") == []


def test_purge_drops_empty_field_lists_but_keeps_term():
    store = PostingsStore()
    store.add_occurrence("lorem", 0, 0)
    store.add_occurrence("lorem", 1, 1)

    store.purge({0})

    node = store.dictionary.lookup("lorem")
    assert node is not None
    assert sorted(node.postings) == [1]


def test_purge_with_no_tombstones_is_noop():
    store = PostingsStore()
    store.add_occurrence("lorem", 0, 0)
    result = store.purge(set())
    assert (result.postings_removed, result.terms_pruned, result.nodes_pruned) == (0, 0, 0)
    assert _pairs(store.get_postings("lorem", 0)) == [(0, 1)]


def test_purge_keeps_prefix_of_removed_longer_term():
    store = PostingsStore()
    store.add_occurrence("ab", 0, 0)
    store.add_occurrence("abcde", 0, 1)

    store.purge({1})

    assert store.dictionary.expand("a") == ["ab"]
