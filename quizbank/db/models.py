"""SQLAlchemy ORM models for the question database."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


class Base(DeclarativeBase):
    """Base class for question database ORM models."""

    pass


class Question(Base):
    """A single question. ``body`` is the searchable text."""

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    explanation: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    created_at: Mapped[str] = mapped_column(String(32), nullable=False, default=_utc_now)
    updated_at: Mapped[str] = mapped_column(
        String(32), nullable=False, default=_utc_now, onupdate=_utc_now
    )

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, body='{self.body[:30]}')>"


class Meta(Base):
    """Key/value settings persisted alongside the data (e.g. FTS tokenizer)."""

    __tablename__ = "meta"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Meta(key='{self.key}', value='{self.value}')>"
