"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from quizbank.db.session import detect_tokenizer, get_engine, get_session
from quizbank.search.policy import EngineMode

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlalchemy.orm import Session


SAMPLE_QUESTIONS = [
    "Which sign means you must come to a full stop?",
    "A yield sign is shaped like an inverted triangle.",
    "Right-turn on red is allowed unless a sign prohibits it.",
    "Interstate highways use blue and red shields.",
    "Discounts of 50% apply to student_licence fees.",
    "Use C:\\path notation for backslash tests.",
]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text(f"""[paths]
database = "{temp_dir / 'questions.db'}"

[search]
tokenizer = "unicode61"
page_size = 10

[display]
colored_output = false
""")
    return config_path


@pytest.fixture
def seeded_config(sample_config: Path, temp_dir: Path) -> Path:
    """Sample config whose database already holds the sample questions."""
    with get_session(temp_dir / "questions.db", EngineMode.UNICODE61) as session:
        _seed(session)
    return sample_config


def _seed(session: Session) -> None:
    from quizbank.db.queries import add_question

    for body in SAMPLE_QUESTIONS:
        add_question(session, body)
    session.commit()


@pytest.fixture
def memory_session() -> Generator[Session, None, None]:
    """In-memory database indexed with unicode61, seeded with sample questions."""
    with get_session(":memory:", EngineMode.UNICODE61) as session:
        _seed(session)
        yield session


@pytest.fixture
def trigram_session() -> Generator[Session, None, None]:
    """In-memory database indexed with trigram (skipped if SQLite lacks it)."""
    if detect_tokenizer(get_engine(":memory:")) is not EngineMode.TRIGRAM:
        pytest.skip("SQLite build has no FTS5 trigram tokenizer")
    with get_session(":memory:", EngineMode.TRIGRAM) as session:
        _seed(session)
        yield session
