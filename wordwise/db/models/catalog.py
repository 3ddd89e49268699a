"""
Vocabulary catalog model.

The catalog is owned by content management; the scheduling core only reads
``id`` and ``status`` from it.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

ACTIVE_STATUS = "Active"


class Word(Base):
    """A learnable vocabulary item."""

    __tablename__ = "words"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    term: Mapped[str] = mapped_column(Text, nullable=False)
    definition: Mapped[str] = mapped_column(Text, nullable=False)
    part_of_speech: Mapped[str | None] = mapped_column(Text)
    example_sentence: Mapped[str | None] = mapped_column(Text)
    phase: Mapped[int] = mapped_column(Integer, default=1)
    status: Mapped[str] = mapped_column(Text, default=ACTIVE_STATUS)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=func.now())

    def __repr__(self) -> str:
        return f"<Word id={self.id} term={self.term!r} status={self.status}>"

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS
