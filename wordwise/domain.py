"""
Domain records shared by the scheduler, the repositories and the service.

These are plain dataclasses; the ORM rows in ``wordwise.db.models`` are
mapped to and from them at the repository boundary so the scheduling engine
never touches a session.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

MAX_ITEM_ID = 2**63 - 1  # signed 64-bit INTEGER primary key


@dataclass(frozen=True)
class Item:
    """Catalog view used by the core: only identity and active status matter."""

    id: int
    active: bool = True


@dataclass(frozen=True)
class Attempt:
    """Raw facts of a single learner answer."""

    is_correct: bool
    confidence: int  # 0-5, validated by the caller
    question_type: str = "recall"
    response_time_sec: int = 0


@dataclass
class ProgressRecord:
    """SM-2 progress for one (user, item) pair."""

    user_id: str
    item_id: int
    level: int = 1  # 1-5 mastery indicator
    total_attempts: int = 0
    total_correct: int = 0
    easiness_factor: float = 2.5  # EF, clamped to [1.3, 2.5]
    consecutive_correct: int = 0  # streak of quality >= 3
    last_attempt_date: datetime | None = None
    first_learned_date: datetime | None = None
    next_review_date: datetime | None = None  # None = new, not yet scheduled

    @property
    def key(self) -> tuple[str, int]:
        return (self.user_id, self.item_id)

    @property
    def accuracy(self) -> float:
        """Fraction of attempts answered correctly."""
        if self.total_attempts == 0:
            return 0.0
        return self.total_correct / self.total_attempts

    def is_due(self, now: datetime) -> bool:
        if self.next_review_date is None:
            return True
        return self.next_review_date <= now


@dataclass(frozen=True)
class AttemptLog:
    """Immutable audit entry, one per recorded attempt."""

    user_id: str
    item_id: int
    attempt_date: datetime
    question_type: str
    is_correct: bool
    confidence: int
    response_time_sec: int
    level_at_attempt: int  # level before this attempt was applied
