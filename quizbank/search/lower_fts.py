"""Lower an expression tree to an SQLite FTS5 MATCH expression.

Terms are emitted bare only when they are clearly word-like (letters,
numbers, ``_`` and ``-``); everything else, and every phrase, is wrapped
in double quotes with embedded quotes doubled. Composite children are
parenthesized so the boolean structure survives FTS5's own precedence.
"""

from __future__ import annotations

import unicodedata

from quizbank.search.ast_nodes import COMPOSITE_NODES, WILDCARD, And, Node, Not, Or, Term


def _is_safe_char(ch: str) -> bool:
    if ch in "_-":
        return True
    # Unicode letter (L*) or number (N*)
    return unicodedata.category(ch)[0] in "LN"


def needs_quoting(text: str) -> bool:
    """Return True if ``text`` cannot be emitted as a bare FTS5 term.

    A trailing ``*`` is ignored since it is FTS5 prefix syntax.
    """
    core = text[:-1] if text.endswith(WILDCARD) else text
    if not core:
        return True
    return not all(_is_safe_char(ch) for ch in core)


def quote_phrase(text: str) -> str:
    """Wrap ``text`` as an FTS5 string, doubling embedded quotes."""
    return '"' + text.replace('"', '""') + '"'


def _render_term(term: Term) -> str:
    if term.phrase or needs_quoting(term.text):
        return quote_phrase(term.text)
    return term.text


def _wrap(node: Node) -> str:
    if isinstance(node, COMPOSITE_NODES):
        return f"({_render(node)})"
    return _render(node)


def _render(node: Node) -> str:
    if isinstance(node, Term):
        return _render_term(node)
    if isinstance(node, Not):
        return f"NOT {_wrap(node.inner)}"
    if isinstance(node, And):
        return " ".join(_wrap(item) for item in node.items)
    if isinstance(node, Or):
        return " OR ".join(_wrap(item) for item in node.items)
    raise TypeError(f"Unknown search node: {node!r}")


def lower_to_match(node: Node) -> str:
    """Render ``node`` as an FTS5 MATCH string.

    Args:
        node: Root of a parsed expression tree.

    Returns:
        The MATCH expression, trimmed. May be empty for degenerate
        hand-built trees; callers treat that as no query.
    """
    return _render(node).strip()
