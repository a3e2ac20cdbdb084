"""Tokenizer-aware search policy.

With the FTS5 ``trigram`` tokenizer, terms shorter than three characters
produce no trigrams and silently match nothing. :func:`parse_search`
detects such queries and reroutes them through the LIKE backend, exactly
as if the user had typed the ``~`` sigil, and reports that it did so.
Explicit ``=`` and ``~`` queries are never rerouted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from quizbank.search.query import (
    EXACT_SIGIL,
    LIKE_SIGIL,
    LikeQuery,
    ParsedQuery,
    parse_query,
)

logger = logging.getLogger(__name__)

# Terms shorter than this cannot produce a trigram
SHORT_TERM_LENGTH = 3

_PHRASE_RE = re.compile(r'"([^"]*)"')
_SKIP_PARTS: frozenset[str] = frozenset({"OR", "|", "(", ")"})


class EngineMode(Enum):
    """FTS5 tokenizer the question index was built with."""

    TRIGRAM = "trigram"
    UNICODE61 = "unicode61"


@dataclass(frozen=True, slots=True)
class SearchPlan:
    """A parsed query plus whether the policy forced LIKE mode."""

    query: ParsedQuery
    auto_fallback: bool = False

    @property
    def kind(self) -> str:
        return self.query.kind


def _coerce_mode(mode: EngineMode | str) -> EngineMode | None:
    if isinstance(mode, EngineMode):
        return mode
    try:
        return EngineMode(str(mode).strip().lower())
    except ValueError:
        return None


def extract_terms(text: str) -> list[str]:
    """Roughly extract the searchable terms of an unprefixed query.

    Quoted phrases count as one term each. Remaining parts are split on
    whitespace, operators are skipped, and a leading ``-`` as well as
    surrounding parentheses are removed.
    """
    q = (text or "").strip()
    terms: list[str] = []

    for m in _PHRASE_RE.finditer(q):
        inner = m.group(1).strip()
        if inner:
            terms.append(inner)

    for part in _PHRASE_RE.sub(" ", q).split():
        if part in _SKIP_PARTS:
            continue
        term = part[1:] if part.startswith("-") else part
        term = term.strip("()")
        if term:
            terms.append(term)

    return terms


def should_auto_fallback(text: str, mode: EngineMode | str) -> bool:
    """Return True if an unprefixed query should run in LIKE mode.

    Args:
        text: The raw query.
        mode: The tokenizer the FTS index uses.
    """
    q = (text or "").strip()
    if not q:
        return False
    if q.startswith(EXACT_SIGIL) or q.startswith(LIKE_SIGIL):
        return False
    if _coerce_mode(mode) is not EngineMode.TRIGRAM:
        return False

    for term in extract_terms(q):
        core = term[:-1] if term.endswith("*") else term
        core = core.strip()
        if core and len(core) < SHORT_TERM_LENGTH:
            return True
    return False


def parse_search(text: str, mode: EngineMode | str) -> SearchPlan:
    """Parse a query, applying the short-term fallback for trigram indexes.

    Args:
        text: The query as typed by the user.
        mode: The tokenizer the FTS index uses.

    Returns:
        The plan to execute. ``auto_fallback`` is True only when the
        query was rerouted to LIKE mode.
    """
    if should_auto_fallback(text, mode):
        rerouted = parse_query(LIKE_SIGIL + text)
        if isinstance(rerouted, LikeQuery):
            logger.debug("Short term in %r, using LIKE instead of trigram FTS", text)
            return SearchPlan(query=rerouted, auto_fallback=True)

    return SearchPlan(query=parse_query(text), auto_fallback=False)
