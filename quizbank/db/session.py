"""Question database session management and FTS5 index lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from quizbank.db.models import Base, Meta
from quizbank.exceptions import DatabaseConnectionError
from quizbank.search.policy import EngineMode

MEMORY_DB = ":memory:"
FTS_TABLE = "questions_fts"
TOKENIZER_META_KEY = "fts_tokenizer"

# Preference order when the tokenizer is auto-detected
_TOKENIZER_PREFERENCE = (EngineMode.TRIGRAM, EngineMode.UNICODE61)

_FTS_TRIGGERS = ("questions_ai", "questions_ad", "questions_au")

logger = logging.getLogger(__name__)


def get_engine(db_path: Path | str) -> Engine:
    """Create SQLAlchemy engine for the question database.

    Args:
        db_path: Path to the SQLite file, or ``":memory:"``.

    Returns:
        SQLAlchemy engine. In-memory engines share one connection so the
        schema survives across sessions.
    """
    if str(db_path) == MEMORY_DB:
        return create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    path = Path(db_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        f"sqlite:///{path}",
        connect_args={
            "timeout": 30,
            "check_same_thread": False,
        },
    )


def _tokenizer_available(engine: Engine, mode: EngineMode) -> bool:
    try:
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE IF EXISTS temp.__tok_check"))
            conn.execute(
                text(
                    "CREATE VIRTUAL TABLE temp.__tok_check "
                    f"USING fts5(x, tokenize='{mode.value}')"
                )
            )
            conn.execute(text("DROP TABLE temp.__tok_check"))
    except OperationalError as exc:
        logger.debug("FTS5 tokenizer %s unavailable: %s", mode.value, exc)
        return False
    return True


def detect_tokenizer(engine: Engine) -> EngineMode:
    """Pick the best FTS5 tokenizer the linked SQLite supports.

    ``trigram`` (SQLite >= 3.34) handles scripts without word
    separators; ``unicode61`` is the fallback.
    """
    for mode in _TOKENIZER_PREFERENCE:
        if _tokenizer_available(engine, mode):
            return mode
    return EngineMode.UNICODE61


def resolve_engine_mode(engine: Engine, configured: EngineMode | str) -> EngineMode:
    """Turn a configured tokenizer (``auto`` or an explicit mode) into a mode."""
    if isinstance(configured, EngineMode):
        return configured
    if configured == "auto":
        return detect_tokenizer(engine)
    return EngineMode(configured)


def _get_meta(session: Session, key: str) -> str | None:
    row = session.get(Meta, key)
    return row.value if row is not None else None


def _set_meta(session: Session, key: str, value: str) -> None:
    row = session.get(Meta, key)
    if row is None:
        session.add(Meta(key=key, value=value))
    else:
        row.value = value


def _fts_exists(session: Session) -> bool:
    row = session.execute(
        text("SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = :name LIMIT 1"),
        {"name": FTS_TABLE},
    ).first()
    return row is not None


def _drop_fts(session: Session) -> None:
    for trigger in _FTS_TRIGGERS:
        session.execute(text(f"DROP TRIGGER IF EXISTS {trigger}"))
    session.execute(text(f"DROP TABLE IF EXISTS {FTS_TABLE}"))


def _create_fts(session: Session, mode: EngineMode) -> None:
    session.execute(
        text(
            f"""
            CREATE VIRTUAL TABLE IF NOT EXISTS {FTS_TABLE} USING fts5(
                body,
                content='questions',
                content_rowid='id',
                tokenize='{mode.value}'
            )
            """
        )
    )
    for trigger in _FTS_TRIGGERS:
        session.execute(text(f"DROP TRIGGER IF EXISTS {trigger}"))
    session.execute(
        text(f"""
        CREATE TRIGGER questions_ai AFTER INSERT ON questions BEGIN
            INSERT INTO {FTS_TABLE}(rowid, body) VALUES (new.id, new.body);
        END
    """)
    )
    session.execute(
        text(f"""
        CREATE TRIGGER questions_ad AFTER DELETE ON questions BEGIN
            INSERT INTO {FTS_TABLE}({FTS_TABLE}, rowid, body) VALUES ('delete', old.id, old.body);
        END
    """)
    )
    session.execute(
        text(f"""
        CREATE TRIGGER questions_au AFTER UPDATE OF body ON questions BEGIN
            INSERT INTO {FTS_TABLE}({FTS_TABLE}, rowid, body) VALUES ('delete', old.id, old.body);
            INSERT INTO {FTS_TABLE}(rowid, body) VALUES (new.id, new.body);
        END
    """)
    )


def ensure_fts(session: Session, mode: EngineMode) -> None:
    """Create the FTS5 index for ``mode``, rebuilding it if the mode changed.

    The tokenizer the index was built with is persisted in the ``meta``
    table so a later run with a different tokenizer rebuilds it.
    """
    previous = _get_meta(session, TOKENIZER_META_KEY)
    exists = _fts_exists(session)
    changed = previous != mode.value

    if exists and changed:
        logger.info("FTS tokenizer changed (%s -> %s), rebuilding index", previous, mode.value)
        _drop_fts(session)

    _create_fts(session, mode)
    if not exists or changed:
        session.execute(text(f"INSERT INTO {FTS_TABLE}({FTS_TABLE}) VALUES ('rebuild')"))
        logger.debug("Rebuilt %s with tokenizer %s", FTS_TABLE, mode.value)

    _set_meta(session, TOKENIZER_META_KEY, mode.value)
    session.commit()


def get_fts_tokenizer(session: Session) -> EngineMode:
    """Return the tokenizer the session's FTS index was built with."""
    mode = session.info.get(TOKENIZER_META_KEY)
    if isinstance(mode, EngineMode):
        return mode
    stored = session.scalar(select(Meta.value).where(Meta.key == TOKENIZER_META_KEY))
    return EngineMode(stored) if stored else EngineMode.UNICODE61


@contextmanager
def get_session(
    db_path: Path | str, tokenizer: EngineMode | str = "auto"
) -> Generator[Session, None, None]:
    """Open a session on the question database.

    Creates tables and the FTS5 index on first use. The resolved
    tokenizer is available through :func:`get_fts_tokenizer`.

    Args:
        db_path: Path to the SQLite file, or ``":memory:"``.
        tokenizer: ``"auto"``, ``"trigram"`` or ``"unicode61"``.

    Yields:
        SQLAlchemy Session, committed on success and rolled back on error.
        The engine behind it is disposed when the block exits.

    Raises:
        DatabaseConnectionError: If the database cannot be opened or the
            FTS5 index cannot be created.
    """
    engine, session = _open_session(db_path, tokenizer)

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        engine.dispose()


def _open_session(
    db_path: Path | str, tokenizer: EngineMode | str
) -> tuple[Engine, Session]:
    engine: Engine | None = None
    session: Session | None = None
    try:
        engine = get_engine(db_path)
        Base.metadata.create_all(engine)
        mode = resolve_engine_mode(engine, tokenizer)
        session = sessionmaker(bind=engine)()
        ensure_fts(session, mode)
    except (SQLAlchemyError, OSError, ValueError) as exc:
        if session is not None:
            session.close()
        if engine is not None:
            engine.dispose()
        raise DatabaseConnectionError(db_path, str(exc)) from exc

    session.info[TOKENIZER_META_KEY] = mode
    return engine, session
