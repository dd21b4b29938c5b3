"""Public facade bundling the index, field registry and ranking engine."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
import logging
from typing import Any

from opentelemetry.trace import SpanKind

from embedded_search.config import Settings, get_settings
from embedded_search.observability import (
    INDEX_OPERATIONS,
    LIVE_DOCUMENTS,
    SEARCH_LATENCY,
    TOMBSTONED_DOCUMENTS,
    create_span,
    track_latency,
)
from embedded_search.search.analyzers import (
    FieldGetter,
    TermFilter,
    Tokenizer,
    analyze,
    attribute_getter,
    default_filter,
    whitespace_tokenizer,
)
from embedded_search.search.bm25_engine import BM25SearchEngine
from embedded_search.search.errors import ConfigurationError
from embedded_search.search.indexer import index_document
from embedded_search.search.inverted_index import create_index, remove_document, vacuum_index
from embedded_search.search.models import SearchResult, VacuumReport
from embedded_search.search.stats import FieldStats


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldDefinition:
    """A registered field: its name, value accessor and score boost."""

    name: str
    getter: FieldGetter
    boost: float = 1.0


class DocumentIndex:
    """In-process full-text index with BM25 ranking and prefix expansion.

    Fields must be registered with ``add_field`` before the first ``add``.
    The index never stores documents, only their ids and field statistics;
    callers keep their own document store and resolve ``SearchResult.doc_id``.

    Not safe for concurrent use: serialize mutations and reads externally.

    Example:
        index = DocumentIndex()
        index.add_field("title", boost=2.0)
        index.add_field("body")
        index.add("doc-1", {"title": "Lorem", "body": "Lorem ipsum dolor"})
        index.search("lor")  # prefix expansion reaches "lorem"
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        term_filter: TermFilter | None = None,
        *,
        k1: float | None = None,
        b: float | None = None,
        expansion_discount: float | None = None,
        name: str = "default",
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.name = name
        self._settings = settings
        self._tokenizer: Tokenizer = tokenizer or whitespace_tokenizer
        self._filter: TermFilter = term_filter or default_filter
        self._engine = BM25SearchEngine(
            k1=settings.bm25_k1 if k1 is None else k1,
            b=settings.bm25_b if b is None else b,
            expansion_discount=settings.expansion_discount if expansion_discount is None else expansion_discount,
        )
        self._index = create_index(0)
        self._fields: list[FieldDefinition] = []
        self._sealed = False

    @property
    def size(self) -> int:
        """Number of live documents."""
        return self._index.size

    def __len__(self) -> int:
        return self._index.size

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._index.registry

    @property
    def fields(self) -> tuple[FieldDefinition, ...]:
        return tuple(self._fields)

    @property
    def field_statistics(self) -> tuple[FieldStats, ...]:
        """Snapshot of per-field length statistics, in registration order."""
        return self._index.fields.snapshot()

    @property
    def k1(self) -> float:
        return self._engine.k1

    @property
    def b(self) -> float:
        return self._engine.b

    def add_field(self, name: str, getter: FieldGetter | None = None, boost: float | None = None) -> None:
        """Register a field; without a getter the value is read by ``name``."""
        if self._sealed:
            raise ConfigurationError(f"Cannot add field {name!r} after documents were indexed")
        if any(existing.name == name for existing in self._fields):
            raise ConfigurationError(f"Field {name!r} is already registered")
        resolved_boost = self._settings.default_field_boost if boost is None else boost
        if resolved_boost < 0:
            raise ConfigurationError(f"Field {name!r} boost must be >= 0, got {resolved_boost}")

        self._fields.append(FieldDefinition(name=name, getter=getter or attribute_getter(name), boost=resolved_boost))
        self._index.add_field()
        logger.debug("Registered field %s (boost %.3f)", name, resolved_boost, extra={"index": self.name})

    def add(self, document_id: Hashable, document: Any) -> None:
        """Index ``document``; raises ``DuplicateDocumentError`` if the id is live."""
        if not self._fields:
            raise ConfigurationError("Register at least one field before adding documents")
        index_document(
            self._index,
            [field.getter for field in self._fields],
            self._tokenizer,
            self._filter,
            document_id,
            document,
        )
        self._sealed = True
        INDEX_OPERATIONS.labels(index=self.name, operation="add").inc()
        self._update_gauges()

    def remove(self, document_id: Hashable) -> None:
        """Tombstone ``document_id``; raises ``UnknownDocumentError`` if it is not live."""
        remove_document(self._index, document_id)
        INDEX_OPERATIONS.labels(index=self.name, operation="remove").inc()
        self._update_gauges()

    def search(self, query: str, limit: int | None = None) -> list[SearchResult]:
        """Search with a free text query; every token separator acts as OR."""
        with (
            create_span(
                "search.query",
                kind=SpanKind.INTERNAL,
                attributes={"search.index": self.name, "search.query": query[:100]},
            ) as span,
            track_latency(SEARCH_LATENCY, index=self.name),
        ):
            INDEX_OPERATIONS.labels(index=self.name, operation="search").inc()
            terms = analyze(query, self._tokenizer, self._filter)
            span.set_attribute("search.term_count", len(terms))
            if not terms:
                span.set_attribute("search.result_count", 0)
                return []

            boosts = [field.boost for field in self._fields]
            ranked = self._engine.rank(self._index, boosts, terms, limit=limit)
            registry = self._index.registry
            results = [SearchResult(doc_id=registry.id_of(hit.doc_key), score=hit.score) for hit in ranked]
            span.set_attribute("search.result_count", len(results))
            return results

    def extend_term(self, term: str) -> list[str]:
        """Expand an already filtered term to every indexed term it prefixes."""
        return self._index.dictionary.expand(term)

    def query_to_terms(self, query: str) -> list[str]:
        """Tokenize, filter and expand ``query``, concatenating expansions in token order."""
        result: list[str] = []
        for term in analyze(query, self._tokenizer, self._filter):
            result.extend(self._index.dictionary.expand(term))
        return result

    def vacuum(self) -> VacuumReport:
        """Purge removed documents from postings and statistics."""
        with create_span("search.vacuum", attributes={"search.index": self.name}) as span:
            report = vacuum_index(self._index)
            span.set_attribute("search.documents_purged", report.documents_purged)
            span.set_attribute("search.postings_removed", report.postings_removed)
        INDEX_OPERATIONS.labels(index=self.name, operation="vacuum").inc()
        self._update_gauges()
        return report

    def _update_gauges(self) -> None:
        LIVE_DOCUMENTS.labels(index=self.name).set(self._index.size)
        TOMBSTONED_DOCUMENTS.labels(index=self.name).set(len(self._index.registry) - self._index.size)
