"""Embeddable full-text search: inverted index, BM25 ranking and prefix expansion."""

from embedded_search.document_index import DocumentIndex, FieldDefinition
from embedded_search.search.analyzers import (
    default_filter,
    lower_case_filter,
    trim_non_word_characters_filter,
    whitespace_tokenizer,
)
from embedded_search.search.errors import (
    ConfigurationError,
    DuplicateDocumentError,
    InvalidDocumentIdError,
    SearchIndexError,
    UnknownDocumentError,
)
from embedded_search.search.inverted_index import InvertedIndex, create_index
from embedded_search.search.models import SearchResult, VacuumReport
from embedded_search.search.stats import FieldStats


__all__ = [
    "ConfigurationError",
    "DocumentIndex",
    "DuplicateDocumentError",
    "FieldDefinition",
    "FieldStats",
    "InvalidDocumentIdError",
    "InvertedIndex",
    "SearchIndexError",
    "SearchResult",
    "UnknownDocumentError",
    "VacuumReport",
    "create_index",
    "default_filter",
    "lower_case_filter",
    "trim_non_word_characters_filter",
    "whitespace_tokenizer",
]
