"""Top-level query parsing: pick an execution strategy for a query string.

Two sigils override the default boolean/full-text interpretation:

- ``=text`` compares the whole question body for equality.
- ``~query`` parses the boolean query but lowers it to LIKE predicates.

Anything else is parsed and lowered to an FTS5 MATCH expression. The
result is one of four immutable variants; nothing here raises for string
input, degenerate queries come back as :class:`EmptyQuery`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from quizbank.search.lower_fts import lower_to_match
from quizbank.search.lower_like import lower_to_like
from quizbank.search.parser import parse_expression

EXACT_SIGIL = "="
LIKE_SIGIL = "~"


@dataclass(frozen=True, slots=True)
class EmptyQuery:
    """Nothing to search for."""

    kind: ClassVar[str] = "empty"


@dataclass(frozen=True, slots=True)
class ExactQuery:
    """Match questions whose body equals ``body``."""

    body: str

    kind: ClassVar[str] = "exact"


@dataclass(frozen=True, slots=True)
class FtsQuery:
    """Pass ``match`` verbatim to the FTS5 MATCH operator."""

    match: str

    kind: ClassVar[str] = "fts"


@dataclass(frozen=True, slots=True)
class LikeQuery:
    """Splice ``where`` into a predicate and bind ``params`` positionally.

    ``where`` only contains ``?`` placeholders and boolean structure.
    """

    where: str
    params: tuple[str, ...]

    kind: ClassVar[str] = "like"


ParsedQuery = Union[EmptyQuery, ExactQuery, FtsQuery, LikeQuery]


def parse_query(text: str | None) -> ParsedQuery:
    """Parse a user query into an execution strategy.

    Args:
        text: The query as typed by the user.

    Returns:
        One of :class:`EmptyQuery`, :class:`ExactQuery`,
        :class:`FtsQuery` or :class:`LikeQuery`.
    """
    q = (text or "").strip()
    if not q:
        return EmptyQuery()

    if q.startswith(EXACT_SIGIL):
        body = q[1:].strip()
        if not body:
            return EmptyQuery()
        return ExactQuery(body=body)

    if q.startswith(LIKE_SIGIL):
        rest = q[1:].strip()
        if not rest:
            return EmptyQuery()
        node = parse_expression(rest)
        if node is None:
            return EmptyQuery()
        fragment = lower_to_like(node)
        if not fragment.where:
            return EmptyQuery()
        return LikeQuery(where=fragment.where, params=fragment.params)

    node = parse_expression(q)
    if node is None:
        return EmptyQuery()
    match = lower_to_match(node)
    if not match:
        return EmptyQuery()
    return FtsQuery(match=match)
