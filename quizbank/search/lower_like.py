"""Lower an expression tree to a parameterized SQL LIKE predicate.

User text never reaches the SQL string: every term becomes a ``?``
placeholder and its pattern is returned in a parameter list, with the
LIKE metacharacters ``%`` and ``_`` (and the escape character itself)
escaped so they match literally.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from quizbank.search.ast_nodes import WILDCARD, And, Node, Not, Or, Term

LIKE_ESCAPE = "\\"

DEFAULT_COLUMN = "body"

_COLUMN_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


@dataclass(frozen=True, slots=True)
class LikeFragment:
    """A WHERE fragment and its positional parameters."""

    where: str
    params: tuple[str, ...]


def escape_like(text: str) -> str:
    """Escape LIKE metacharacters using a backslash escape."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _render(node: Node, params: list[str], predicate: str) -> str:
    if isinstance(node, Term):
        text = node.text
        if not node.phrase and text.endswith(WILDCARD):
            params.append(escape_like(text[:-1]) + "%")
        else:
            params.append("%" + escape_like(text) + "%")
        return predicate
    if isinstance(node, Not):
        return f"NOT ({_render(node.inner, params, predicate)})"
    if isinstance(node, And):
        return " AND ".join(f"({_render(item, params, predicate)})" for item in node.items)
    if isinstance(node, Or):
        return " OR ".join(f"({_render(item, params, predicate)})" for item in node.items)
    raise TypeError(f"Unknown search node: {node!r}")


def lower_to_like(node: Node, column: str = DEFAULT_COLUMN) -> LikeFragment:
    """Render ``node`` as a LIKE predicate over ``column``.

    Args:
        node: Root of a parsed expression tree.
        column: Column the predicate tests. Must be a plain (optionally
            dotted) identifier since it is spliced into the SQL.

    Returns:
        The WHERE fragment and its parameters in placeholder order.

    Raises:
        ValueError: If ``column`` is not a plain identifier.
    """
    if not _COLUMN_RE.match(column):
        raise ValueError(f"Invalid column name for LIKE predicate: {column!r}")

    predicate = f"{column} LIKE ? ESCAPE '{LIKE_ESCAPE}'"
    params: list[str] = []
    where = _render(node, params, predicate).strip()
    return LikeFragment(where=where, params=tuple(params))
