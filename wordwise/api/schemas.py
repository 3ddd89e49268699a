"""Request/response models for the HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, StrictBool, StrictInt

from wordwise.catalog import WordEntry
from wordwise.domain import AttemptLog, ProgressRecord
from wordwise.stats import StudentStats, SystemStats


class WordOut(BaseModel):
    id: int
    term: str
    definition: str
    part_of_speech: str | None = None
    example_sentence: str | None = None
    phase: int = 1
    status: str

    @classmethod
    def from_entry(cls, entry: WordEntry) -> WordOut:
        return cls(
            id=entry.id,
            term=entry.term,
            definition=entry.definition,
            part_of_speech=entry.part_of_speech,
            example_sentence=entry.example_sentence,
            phase=entry.phase,
            status=entry.status,
        )


class WordCreate(BaseModel):
    term: str = Field(min_length=1)
    definition: str = Field(min_length=1)
    part_of_speech: str | None = None
    example_sentence: str | None = None
    phase: int = Field(default=1, ge=1)
    status: str = "Active"


class WordUpdate(BaseModel):
    """Partial word update. Omitted or null fields are left unchanged."""

    term: str | None = Field(default=None, min_length=1)
    definition: str | None = Field(default=None, min_length=1)
    part_of_speech: str | None = None
    example_sentence: str | None = None
    phase: int | None = Field(default=None, ge=1)
    status: str | None = Field(default=None, min_length=1)


class ProgressOut(BaseModel):
    user_id: str
    item_id: int
    level: int
    total_attempts: int
    total_correct: int
    easiness_factor: float
    consecutive_correct: int
    last_attempt_date: datetime | None
    first_learned_date: datetime | None
    next_review_date: datetime | None

    @classmethod
    def from_record(cls, record: ProgressRecord) -> ProgressOut:
        return cls(
            user_id=record.user_id,
            item_id=record.item_id,
            level=record.level,
            total_attempts=record.total_attempts,
            total_correct=record.total_correct,
            easiness_factor=record.easiness_factor,
            consecutive_correct=record.consecutive_correct,
            last_attempt_date=record.last_attempt_date,
            first_learned_date=record.first_learned_date,
            next_review_date=record.next_review_date,
        )


class QueueEntryOut(BaseModel):
    word: WordOut
    progress: ProgressOut | None


class ProgressEntryOut(BaseModel):
    word: WordOut
    progress: ProgressOut


class AttemptIn(BaseModel):
    """Attempt body. Types are strict; ranges are checked by the service."""

    item_id: StrictInt
    question_type: str
    is_correct: StrictBool
    confidence: StrictInt
    response_time_sec: StrictInt | None = None


class AttemptLogOut(BaseModel):
    item_id: int
    attempt_date: datetime
    question_type: str
    is_correct: bool
    confidence: int
    response_time_sec: int
    level_at_attempt: int

    @classmethod
    def from_log(cls, entry: AttemptLog) -> AttemptLogOut:
        return cls(
            item_id=entry.item_id,
            attempt_date=entry.attempt_date,
            question_type=entry.question_type,
            is_correct=entry.is_correct,
            confidence=entry.confidence,
            response_time_sec=entry.response_time_sec,
            level_at_attempt=entry.level_at_attempt,
        )


class SystemStatsOut(BaseModel):
    total_words: int
    total_attempts: int
    mastered_count: int
    learning_count: int
    level_counts: dict[int, int]

    @classmethod
    def from_stats(cls, stats: SystemStats) -> SystemStatsOut:
        return cls(
            total_words=stats.total_words,
            total_attempts=stats.total_attempts,
            mastered_count=stats.mastered_count,
            learning_count=stats.learning_count,
            level_counts=stats.level_counts,
        )


class DashboardOut(BaseModel):
    system_stats: SystemStatsOut


class StudentStatsOut(BaseModel):
    user_id: str
    mastered_count: int
    learning_count: int
    total_attempts: int
    accuracy: float

    @classmethod
    def from_stats(cls, stats: StudentStats) -> StudentStatsOut:
        return cls(
            user_id=stats.user_id,
            mastered_count=stats.mastered_count,
            learning_count=stats.learning_count,
            total_attempts=stats.total_attempts,
            accuracy=round(stats.accuracy, 1),
        )


class ErrorOut(BaseModel):
    message: str
    field: str | None = None
