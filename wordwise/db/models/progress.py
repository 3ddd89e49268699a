"""
Learner progress models.

- StudentProgress: one row per (user, word), mutated on every attempt
- AttemptLogEntry: append-only audit log, one row per attempt
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class StudentProgress(Base):
    """
    SM-2 state per learner per word.

    Created lazily on the first attempt and removed only by cascade when the
    word is deleted from the catalog.
    """

    __tablename__ = "student_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    word_id: Mapped[int] = mapped_column(
        ForeignKey("words.id", ondelete="CASCADE"), nullable=False
    )

    level: Mapped[int] = mapped_column(Integer, default=1)
    total_attempts: Mapped[int] = mapped_column(Integer, default=0)
    total_correct: Mapped[int] = mapped_column(Integer, default=0)
    easiness_factor: Mapped[float] = mapped_column(Float, default=2.5)
    consecutive_correct: Mapped[int] = mapped_column(Integer, default=0)

    last_attempt_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    first_learned_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    next_review_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("user_id", "word_id", name="uq_progress_user_word"),
        Index("idx_progress_user_next_review", "user_id", "next_review_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<StudentProgress user={self.user_id} word={self.word_id} "
            f"level={self.level} ef={self.easiness_factor}>"
        )


class AttemptLogEntry(Base):
    """Immutable record of a single attempt. Never updated or deleted by the core."""

    __tablename__ = "attempt_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    word_id: Mapped[int] = mapped_column(
        ForeignKey("words.id", ondelete="CASCADE"), nullable=False
    )
    attempt_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    question_type: Mapped[str] = mapped_column(Text, nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False)
    confidence: Mapped[int] = mapped_column(Integer, nullable=False)
    response_time_sec: Mapped[int] = mapped_column(Integer, default=0)
    term_level_at_attempt: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (Index("idx_attempt_logs_user_word", "user_id", "word_id"),)

    def __repr__(self) -> str:
        return f"<AttemptLogEntry user={self.user_id} word={self.word_id} correct={self.is_correct}>"
