"""Default tokenizer, term filters and field getters.

Tokenizers and filters are plain callables. The index only depends on the
call signatures described by the protocols below, so any function (or object
with ``__call__``) satisfying them can be plugged in.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
import re
from typing import Any, Protocol


class Tokenizer(Protocol):
    """Breaks raw text into an ordered sequence of tokens."""

    def __call__(self, text: str) -> Sequence[str]:  # pragma: no cover - interface definition
        ...


class TermFilter(Protocol):
    """Normalizes a token into an indexable term; ``""`` discards the token."""

    def __call__(self, token: str) -> str:  # pragma: no cover - interface definition
        ...


FieldGetter = Callable[[Any], "str | None"]

_WHITESPACE_PATTERN = re.compile(r"\s+")
_LEADING_NON_WORD = re.compile(r"^\W+")
_TRAILING_NON_WORD = re.compile(r"\W+$")


def whitespace_tokenizer(text: str) -> list[str]:
    """Split on runs of whitespace; contiguous non-whitespace forms one token."""
    stripped = text.strip()
    if not stripped:
        return []
    return _WHITESPACE_PATTERN.split(stripped)


def lower_case_filter(term: str) -> str:
    return term.lower()


def trim_non_word_characters_filter(term: str) -> str:
    """Remove non-word characters at the start and at the end of the term."""
    return _TRAILING_NON_WORD.sub("", _LEADING_NON_WORD.sub("", term))


def default_filter(term: str) -> str:
    """Lowercase the term, then trim surrounding punctuation."""
    return trim_non_word_characters_filter(lower_case_filter(term))


def attribute_getter(name: str) -> FieldGetter:
    """Return a getter reading ``name`` from a mapping key or an attribute.

    Missing values yield ``None`` which the indexer treats as empty text.
    """

    def getter(document: Any) -> str | None:
        if isinstance(document, Mapping):
            return document.get(name)
        return getattr(document, name, None)

    getter.__name__ = f"get_{name}"
    return getter


def analyze(text: str, tokenizer: Tokenizer, term_filter: TermFilter) -> list[str]:
    """Tokenize ``text`` and filter every token, dropping tokens that filter to ``""``."""
    terms: list[str] = []
    for token in tokenizer(text):
        term = term_filter(token)
        if term:
            terms.append(term)
    return terms
