"""Character trie mapping indexed terms to their per-field postings.

Every node owns a ``postings`` mapping of field index -> postings list. A node
is an indexed term iff that mapping is non-empty; interior nodes that only
exist to spell longer terms carry no postings. Empty postings lists are never
stored, so ``bool(node.postings)`` is the term test.

Walks are iterative so very long tokens (URLs, base64 blobs) cannot exhaust
the interpreter's recursion limit.
"""

from __future__ import annotations

from collections.abc import Iterator

from embedded_search.search.models import Posting


class TermNode:
    """Trie node; see module docstring for the term invariant."""

    __slots__ = ("children", "postings")

    def __init__(self) -> None:
        self.children: dict[str, TermNode] = {}
        self.postings: dict[int, list[Posting]] = {}

    @property
    def is_term(self) -> bool:
        return bool(self.postings)

    def field_postings(self, field_index: int) -> list[Posting]:
        return self.postings.get(field_index, [])

    def __repr__(self) -> str:
        return f"TermNode(fields={sorted(self.postings)}, children={len(self.children)})"


class TermDictionary:
    """Exact lookup and prefix expansion over indexed terms."""

    def __init__(self) -> None:
        self.root = TermNode()

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_terms())

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and self.lookup(term) is not None

    def _find_node(self, prefix: str) -> TermNode | None:
        node = self.root
        for char in prefix:
            child = node.children.get(char)
            if child is None:
                return None
            node = child
        return node

    def _ensure_node(self, term: str) -> TermNode:
        node = self.root
        for char in term:
            child = node.children.get(char)
            if child is None:
                child = TermNode()
                node.children[char] = child
            node = child
        return node

    def insert(self, term: str, field_index: int, doc_key: int, frequency: int = 1) -> Posting:
        """Merge ``frequency`` occurrences of ``term`` into the postings of ``doc_key``.

        Postings lists stay in ascending document-key order: a key equal to the
        last posting's key is merged, a larger key is appended, and a smaller
        key means the caller broke the monotonic key assignment.
        """
        assert term, "empty terms are never indexed"
        assert frequency > 0, "postings carry a positive frequency"
        node = self._ensure_node(term)
        postings = node.postings.setdefault(field_index, [])
        if postings and postings[-1].doc_key == doc_key:
            postings[-1].frequency += frequency
            return postings[-1]
        assert not postings or postings[-1].doc_key < doc_key, (
            f"postings for {term!r} in field {field_index} would go out of order: "
            f"{doc_key} after {postings[-1].doc_key}"
        )
        posting = Posting(doc_key=doc_key, frequency=frequency)
        postings.append(posting)
        return posting

    def lookup(self, term: str) -> TermNode | None:
        """Return the node for ``term`` when it is indexed, else ``None``."""
        if not term:
            return None
        node = self._find_node(term)
        if node is None or not node.is_term:
            return None
        return node

    def iter_terms(self, prefix: str = "") -> Iterator[tuple[str, TermNode]]:
        """Yield ``(term, node)`` for indexed terms under ``prefix`` in lexicographic order."""
        start = self._find_node(prefix)
        if start is None:
            return
        stack: list[tuple[str, TermNode]] = [(prefix, start)]
        while stack:
            term, node = stack.pop()
            if node.is_term:
                yield term, node
            # Reverse-sorted push so the smallest child is popped first.
            for char in sorted(node.children, reverse=True):
                stack.append((term + char, node.children[char]))

    def expand(self, prefix: str) -> list[str]:
        """Return every indexed term starting with ``prefix`` (``prefix`` itself included).

        Results are sorted and unique. An empty prefix is not a meaningful
        query term and expands to nothing.
        """
        if not prefix:
            return []
        return [term for term, _node in self.iter_terms(prefix)]

    def prune(self) -> int:
        """Drop nodes that carry no postings and no children.

        Returns the number of nodes removed. The root is always kept.
        """
        removed = 0
        # Post-order: children are settled before their parent is inspected.
        stack: list[tuple[TermNode, bool]] = [(self.root, False)]
        while stack:
            node, visited = stack.pop()
            if not visited:
                stack.append((node, True))
                stack.extend((child, False) for child in node.children.values())
                continue
            for char in [c for c, child in node.children.items() if not child.children and not child.postings]:
                del node.children[char]
                removed += 1
        return removed
