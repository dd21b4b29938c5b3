"""
Indexing and ranking engine package.

This package provides a pure-Python in-memory search core:
- analyzers: Default tokenizer, term filters and field getters
- term_dictionary: Character trie with prefix expansion
- postings: Per-field postings lists keyed by term
- registry: Document ids, dense keys and tombstones
- stats: Field length statistics and BM25 weighting
- indexer: Document indexing pipeline
- bm25_engine: Query scoring engine
- inverted_index: Index aggregate, removal and vacuum
"""
