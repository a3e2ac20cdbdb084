"""Question database: ORM models, FTS5 index and search execution."""

from quizbank.db.models import Base, Meta, Question
from quizbank.db.queries import add_question, count_search, execute_search
from quizbank.db.session import (
    detect_tokenizer,
    ensure_fts,
    get_engine,
    get_fts_tokenizer,
    get_session,
)

__all__ = [
    "Base",
    "Meta",
    "Question",
    "add_question",
    "count_search",
    "detect_tokenizer",
    "ensure_fts",
    "execute_search",
    "get_engine",
    "get_fts_tokenizer",
    "get_session",
]
