"""Document registry: external ids, dense internal keys and tombstones.

Keys are handed out in increasing order and never reused, not even after a
vacuum. Per-document field lengths live in an arena indexed by key; purged
slots are cleared rather than compacted so existing keys stay valid.

Re-adding an id follows one fixed policy: an id whose key is live is rejected
with ``DuplicateDocumentError``; an id that was removed but not yet vacuumed
gets a fresh key while the old key stays tombstoned until the next vacuum.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Hashable, Sequence
import logging

from embedded_search.search.errors import DuplicateDocumentError, InvalidDocumentIdError, UnknownDocumentError


logger = logging.getLogger(__name__)


class DocumentRegistry:
    """Maps caller document ids to internal keys and tracks removals."""

    def __init__(self) -> None:
        self._keys: dict[Hashable, int] = {}
        self._ids: list[Hashable] = []
        self._lengths: list[tuple[int, ...] | None] = []
        self._registered = 0
        self._tombstones: set[int] = set()
        self._tombstoned_lengths: defaultdict[int, int] = defaultdict(int)

    def __len__(self) -> int:
        """Registered keys, live and tombstoned."""
        return self._registered

    def __contains__(self, document_id: object) -> bool:
        return self.key_of(document_id) is not None

    @property
    def live_count(self) -> int:
        return self._registered - len(self._tombstones)

    @property
    def tombstones(self) -> frozenset[int]:
        return frozenset(self._tombstones)

    @property
    def next_key(self) -> int:
        return len(self._ids)

    def is_registered(self, doc_key: int) -> bool:
        return 0 <= doc_key < len(self._lengths) and self._lengths[doc_key] is not None

    def is_live(self, doc_key: int) -> bool:
        return self.is_registered(doc_key) and doc_key not in self._tombstones

    def is_tombstoned(self, doc_key: int) -> bool:
        return doc_key in self._tombstones

    def key_of(self, document_id: object) -> int | None:
        """Return the live key for ``document_id`` or ``None``."""
        try:
            key = self._keys.get(document_id)  # type: ignore[call-overload]
        except TypeError:
            return None
        if key is None or key in self._tombstones:
            return None
        return key

    def id_of(self, doc_key: int) -> Hashable:
        assert self.is_registered(doc_key), f"document key {doc_key} is not registered"
        return self._ids[doc_key]

    def field_length(self, doc_key: int, field_index: int) -> int:
        lengths = self._lengths[doc_key]
        assert lengths is not None, f"document key {doc_key} is not registered"
        return lengths[field_index]

    def field_lengths(self, doc_key: int) -> tuple[int, ...]:
        lengths = self._lengths[doc_key]
        assert lengths is not None, f"document key {doc_key} is not registered"
        return lengths

    def tombstoned_length(self, field_index: int) -> int:
        """Total length still attributed to tombstoned documents in a field."""
        return self._tombstoned_lengths.get(field_index, 0)

    def ensure_available(self, document_id: Hashable) -> None:
        """Raise when ``document_id`` is unhashable or already live."""
        try:
            hash(document_id)
        except TypeError as exc:
            raise InvalidDocumentIdError(document_id) from exc
        if self.key_of(document_id) is not None:
            raise DuplicateDocumentError(document_id)

    def register(self, document_id: Hashable, lengths: Sequence[int]) -> int:
        """Assign the next key to ``document_id`` and record its field lengths."""
        self.ensure_available(document_id)
        doc_key = len(self._ids)
        previous = self._keys.get(document_id)
        if previous is not None:
            logger.debug("Re-adding %r under key %d; key %d awaits vacuum", document_id, doc_key, previous)
        self._keys[document_id] = doc_key
        self._ids.append(document_id)
        self._lengths.append(tuple(lengths))
        self._registered += 1
        return doc_key

    def tombstone(self, document_id: Hashable) -> int:
        """Mark the live key of ``document_id`` as removed; O(number of fields)."""
        doc_key = self.key_of(document_id)
        if doc_key is None:
            raise UnknownDocumentError(document_id)
        self._tombstones.add(doc_key)
        for field_index, length in enumerate(self.field_lengths(doc_key)):
            self._tombstoned_lengths[field_index] += length
        return doc_key

    def pending_lengths(self) -> dict[int, int]:
        """Per-field lengths that the next vacuum must subtract."""
        return {field_index: length for field_index, length in self._tombstoned_lengths.items() if length}

    def purge(self) -> frozenset[int]:
        """Forget every tombstoned key and clear the tombstone set.

        Returns the keys that were purged.
        """
        purged = frozenset(self._tombstones)
        for doc_key in purged:
            document_id = self._ids[doc_key]
            if self._keys.get(document_id) == doc_key:
                del self._keys[document_id]
            self._ids[doc_key] = None
            self._lengths[doc_key] = None
        self._registered -= len(purged)
        self._tombstones.clear()
        self._tombstoned_lengths.clear()
        return purged
