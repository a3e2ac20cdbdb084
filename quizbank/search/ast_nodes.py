"""AST data classes for parsed search queries.

The expression tree is a closed set of four immutable node types. Both
lowering backends dispatch over exactly these classes and raise
``TypeError`` for anything else.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

# ASCII control characters, including DEL
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE_RE = re.compile(r"\s")

WILDCARD = "*"


@dataclass(frozen=True, slots=True)
class Term:
    """A searchable leaf: word, phrase or prefix wildcard.

    For wildcard terms ``text`` keeps the trailing ``*`` so both backends
    see the marker in the same place for words and phrases.
    """

    text: str
    phrase: bool = False
    wildcard: bool = False


@dataclass(frozen=True, slots=True)
class Not:
    """Unary negation."""

    inner: Node


@dataclass(frozen=True, slots=True)
class And:
    """Conjunction. The parser only builds this with two or more items."""

    items: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Or:
    """Disjunction. The parser only builds this with two or more items."""

    items: tuple[Node, ...]


Node = Union[Term, Not, And, Or]

COMPOSITE_NODES = (And, Or)


@dataclass(frozen=True, slots=True)
class NormalizedTerm:
    """Result of :func:`normalize_term`. An empty ``text`` means no term."""

    text: str
    phrase: bool = False
    wildcard: bool = False

    def __bool__(self) -> bool:
        return bool(self.text)

    def to_term(self) -> Term:
        return Term(text=self.text, phrase=self.phrase, wildcard=self.wildcard)


_EMPTY_TERM = NormalizedTerm("")


def normalize_term(raw: str) -> NormalizedTerm:
    """Clean a raw word token into a term.

    Strips control characters and surrounding double quotes, detects a
    trailing ``*`` wildcard (only when something precedes it) and marks
    the term as a phrase when whitespace remains inside it.

    Args:
        raw: The raw word as produced by the tokenizer.

    Returns:
        The normalized term; falsy when nothing usable remains.
    """
    text = (raw or "").strip()
    if not text:
        return _EMPTY_TERM

    wildcard = text.endswith(WILDCARD) and len(text) > 1
    core = text[:-1] if wildcard else text

    cleaned = _CONTROL_CHARS_RE.sub("", core).strip('"').strip()
    if not cleaned:
        return _EMPTY_TERM

    phrase = _WHITESPACE_RE.search(cleaned) is not None
    if wildcard:
        cleaned += WILDCARD
    return NormalizedTerm(text=cleaned, phrase=phrase, wildcard=wildcard)
