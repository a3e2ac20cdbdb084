"""Execute parsed search queries against the question database."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import Integer, func, select, text
from sqlalchemy.exc import OperationalError

from quizbank.db.models import Question
from quizbank.db.session import FTS_TABLE
from quizbank.exceptions import SearchExecutionError, ValidationError
from quizbank.search.policy import SearchPlan
from quizbank.search.query import EmptyQuery, ExactQuery, FtsQuery, LikeQuery, ParsedQuery

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Select
    from sqlalchemy.orm import Session
    from sqlalchemy.sql.elements import ColumnElement

logger = logging.getLogger(__name__)

SORT_KEYS: tuple[str, ...] = (
    "id_desc",
    "id_asc",
    "created_desc",
    "created_asc",
    "updated_desc",
    "updated_asc",
)
DEFAULT_SORT = "id_desc"

_SORT_COLUMNS = {
    "id": Question.id,
    "created": Question.created_at,
    "updated": Question.updated_at,
}


def add_question(session: Session, body: str, explanation: str = "") -> Question:
    """Insert a question and return it with its id assigned.

    Raises:
        ValidationError: If ``body`` is blank.
    """
    body = (body or "").strip()
    if not body:
        raise ValidationError("body", body, "must not be empty")

    question = Question(body=body, explanation=(explanation or "").strip())
    session.add(question)
    session.flush()
    return question


def bind_positional(where: str, params: tuple[str, ...] | list[str]):
    """Turn a ``?``-placeholder fragment into a bound ``text()`` clause.

    Each ``?`` is renamed to a named parameter in order, since ``text()``
    only understands named binds.

    Raises:
        ValueError: If the placeholder and parameter counts differ.
    """
    pieces = where.split("?")
    if len(pieces) - 1 != len(params):
        raise ValueError(
            f"Placeholder count {len(pieces) - 1} does not match {len(params)} parameters"
        )

    sql = pieces[0]
    binds: dict[str, str] = {}
    for i, (piece, value) in enumerate(zip(pieces[1:], params)):
        name = f"like_{i}"
        sql += f":{name}{piece}"
        binds[name] = value
    return text(sql).bindparams(**binds)


def _build_clause(query: ParsedQuery) -> ColumnElement | None:
    """Build the WHERE clause for a parsed query (None means no filter)."""
    if isinstance(query, EmptyQuery):
        return None
    if isinstance(query, ExactQuery):
        return Question.body == query.body
    if isinstance(query, FtsQuery):
        fts_subquery = (
            text(f"SELECT rowid FROM {FTS_TABLE} WHERE {FTS_TABLE} MATCH :fts_match")
            .bindparams(fts_match=query.match)
            .columns(rowid=Integer)
        )
        return Question.id.in_(fts_subquery)
    if isinstance(query, LikeQuery):
        return bind_positional(query.where, query.params)
    raise TypeError(f"Unknown parsed query: {query!r}")


def _unwrap(query: ParsedQuery | SearchPlan) -> ParsedQuery:
    if isinstance(query, SearchPlan):
        return query.query
    return query


def order_by_for(sort: str) -> tuple[ColumnElement, ...]:
    """Return the ORDER BY columns for a sort key.

    Timestamp sorts break ties on ``id`` in the same direction. Unknown
    keys fall back to :data:`DEFAULT_SORT`.
    """
    if sort not in SORT_KEYS:
        sort = DEFAULT_SORT
    column_name, _, direction = sort.rpartition("_")

    column = _SORT_COLUMNS[column_name]
    if direction == "asc":
        primary, tie = column.asc(), Question.id.asc()
    else:
        primary, tie = column.desc(), Question.id.desc()
    if column_name == "id":
        return (primary,)
    return (primary, tie)


def _where(stmt: Select, parsed: ParsedQuery, filters: Sequence[ColumnElement]) -> Select:
    clause = _build_clause(parsed)
    if clause is not None:
        stmt = stmt.where(clause)
    for extra in filters:
        stmt = stmt.where(extra)
    return stmt


def execute_search(
    session: Session,
    query: ParsedQuery | SearchPlan,
    *,
    limit: int | None = None,
    offset: int = 0,
    sort: str = DEFAULT_SORT,
    filters: Sequence[ColumnElement] = (),
) -> list[Question]:
    """Execute a parsed query against the question database.

    Args:
        session: Session from :func:`quizbank.db.session.get_session`.
        query: Result of ``parse_query`` or ``parse_search``.
        limit: Maximum number of rows to return.
        offset: Number of rows to skip.
        sort: One of :data:`SORT_KEYS`.
        filters: Extra WHERE clauses ANDed with the query predicate.

    Returns:
        Matching questions in ``sort`` order. An empty query returns all.

    Raises:
        SearchExecutionError: If SQLite rejects the generated expression.
    """
    parsed = _unwrap(query)
    stmt = _where(select(Question), parsed, filters)
    stmt = stmt.order_by(*order_by_for(sort))
    if limit is not None:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)

    try:
        return list(session.scalars(stmt).all())
    except OperationalError as exc:
        logger.debug("Search %s rejected by SQLite: %s", parsed, exc)
        raise SearchExecutionError(parsed.kind, str(exc.orig)) from exc


def count_search(
    session: Session,
    query: ParsedQuery | SearchPlan,
    *,
    filters: Sequence[ColumnElement] = (),
) -> int:
    """Count questions matching a parsed query and any extra filters."""
    parsed = _unwrap(query)
    stmt = _where(select(func.count()).select_from(Question), parsed, filters)

    try:
        return session.scalar(stmt) or 0
    except OperationalError as exc:
        raise SearchExecutionError(parsed.kind, str(exc.orig)) from exc
