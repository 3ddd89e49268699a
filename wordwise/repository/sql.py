"""
SQLAlchemy-backed progress repository.

Each attempt runs in one transaction: the prior row is read with
``SELECT ... FOR UPDATE`` (a row lock on PostgreSQL, ignored by SQLite),
the progress row is inserted or updated and the log row appended, then the
transaction commits. Any database error rolls the whole unit back and is
surfaced as ``StorageError``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from wordwise.catalog import ItemCatalog
from wordwise.core.clock import ensure_utc
from wordwise.core.errors import StorageError
from wordwise.db.database import Database
from wordwise.db.models import AttemptLogEntry, StudentProgress
from wordwise.domain import AttemptLog, ProgressRecord

from .base import AttemptScope, ProgressRepository


def _to_record(row: StudentProgress) -> ProgressRecord:
    return ProgressRecord(
        user_id=row.user_id,
        item_id=row.word_id,
        level=row.level if row.level is not None else 1,
        total_attempts=row.total_attempts or 0,
        total_correct=row.total_correct or 0,
        easiness_factor=float(row.easiness_factor if row.easiness_factor is not None else 2.5),
        consecutive_correct=row.consecutive_correct or 0,
        last_attempt_date=ensure_utc(row.last_attempt_date),
        first_learned_date=ensure_utc(row.first_learned_date),
        next_review_date=ensure_utc(row.next_review_date),
    )


def _apply(row: StudentProgress, record: ProgressRecord) -> None:
    row.level = record.level
    row.total_attempts = record.total_attempts
    row.total_correct = record.total_correct
    row.easiness_factor = record.easiness_factor
    row.consecutive_correct = record.consecutive_correct
    row.last_attempt_date = record.last_attempt_date
    row.next_review_date = record.next_review_date
    if row.first_learned_date is None:
        row.first_learned_date = record.first_learned_date


def _to_log_row(entry: AttemptLog) -> AttemptLogEntry:
    return AttemptLogEntry(
        user_id=entry.user_id,
        word_id=entry.item_id,
        attempt_date=entry.attempt_date,
        question_type=entry.question_type,
        is_correct=entry.is_correct,
        confidence=entry.confidence,
        response_time_sec=entry.response_time_sec,
        term_level_at_attempt=entry.level_at_attempt,
    )


def _to_log(row: AttemptLogEntry) -> AttemptLog:
    return AttemptLog(
        user_id=row.user_id,
        item_id=row.word_id,
        attempt_date=ensure_utc(row.attempt_date),
        question_type=row.question_type,
        is_correct=bool(row.is_correct),
        confidence=row.confidence,
        response_time_sec=row.response_time_sec or 0,
        level_at_attempt=row.term_level_at_attempt,
    )


def _progress_query(user_id: str, item_id: int):
    return select(StudentProgress).where(
        StudentProgress.user_id == user_id,
        StudentProgress.word_id == item_id,
    )


class SqlProgressRepository(ProgressRepository):
    """Repository over the ``student_progress`` and ``attempt_logs`` tables."""

    def __init__(self, db: Database, catalog: ItemCatalog):
        super().__init__(catalog)
        self.db = db

    @contextmanager
    def _transaction(self, user_id: str, item_id: int) -> Iterator[AttemptScope]:
        session = self.db.SessionLocal()
        try:
            row = session.scalars(_progress_query(user_id, item_id).with_for_update()).one_or_none()
            scope = AttemptScope(user_id, item_id, _to_record(row) if row else None)

            yield scope

            scope.ensure_paired()
            if scope.has_writes:
                if row is None:
                    row = StudentProgress(user_id=user_id, word_id=item_id)
                    session.add(row)
                _apply(row, scope.record)
                session.add_all(_to_log_row(e) for e in scope.logs)
                session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Attempt on ({user_id}, {item_id}) rolled back: {e}")
            raise StorageError(f"Failed to record attempt for item {item_id}: {e}") from e
        except Exception:  # Intentionally broad - rollback on any error before re-raising
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, user_id: str, item_id: int) -> ProgressRecord | None:
        try:
            with self.db.session_scope() as session:
                row = session.scalars(_progress_query(user_id, item_id)).one_or_none()
                return _to_record(row) if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load progress for item {item_id}: {e}") from e

    def _write_record(self, record: ProgressRecord) -> None:
        try:
            with self.db.session_scope() as session:
                row = session.scalars(
                    _progress_query(record.user_id, record.item_id).with_for_update()
                ).one_or_none()
                if row is None:
                    row = StudentProgress(user_id=record.user_id, word_id=record.item_id)
                    session.add(row)
                _apply(row, record)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save progress for item {record.item_id}: {e}") from e

    def append_log(self, entry: AttemptLog) -> None:
        try:
            with self.db.session_scope() as session:
                session.add(_to_log_row(entry))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to append attempt log: {e}") from e

    def list_by_user(self, user_id: str) -> list[ProgressRecord]:
        try:
            with self.db.session_scope() as session:
                rows = session.scalars(
                    select(StudentProgress)
                    .where(StudentProgress.user_id == user_id)
                    .order_by(StudentProgress.word_id)
                ).all()
                return [_to_record(r) for r in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list progress for {user_id}: {e}") from e

    def list_all(self) -> list[ProgressRecord]:
        try:
            with self.db.session_scope() as session:
                rows = session.scalars(
                    select(StudentProgress).order_by(StudentProgress.user_id, StudentProgress.word_id)
                ).all()
                return [_to_record(r) for r in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list progress: {e}") from e

    def list_logs(
        self,
        user_id: str,
        item_id: int | None = None,
        limit: int | None = None,
    ) -> list[AttemptLog]:
        query = select(AttemptLogEntry).where(AttemptLogEntry.user_id == user_id)
        if item_id is not None:
            query = query.where(AttemptLogEntry.word_id == item_id)
        query = query.order_by(AttemptLogEntry.attempt_date.desc(), AttemptLogEntry.id.desc())
        if limit is not None:
            query = query.limit(limit)
        try:
            with self.db.session_scope() as session:
                return [_to_log(r) for r in session.scalars(query).all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list attempt logs for {user_id}: {e}") from e
