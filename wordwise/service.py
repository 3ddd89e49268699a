"""
Progress service: the operations exposed to the API and the CLI.

- record_attempt: validate, then run the scheduling engine inside the
  repository's per-key attempt scope
- get_review_queue: items due for a learner right now
- get_progress: items the learner has attempted, with their records
- get_history: the learner's attempt log
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt
from pydantic import ValidationError as PydanticValidationError

from wordwise.core.clock import Clock, SystemClock
from wordwise.core.errors import NotFoundError, ValidationError
from wordwise.domain import MAX_ITEM_ID, Attempt, AttemptLog, Item, ProgressRecord
from wordwise.repository import ProgressRepository
from wordwise.scheduling import QueueEntry, ReviewQueueSelector, SchedulingEngine


class AttemptRequest(BaseModel):
    """Validated attempt payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str = Field(min_length=1)
    item_id: StrictInt = Field(ge=1, le=MAX_ITEM_ID)
    question_type: str = Field(min_length=1)
    is_correct: StrictBool
    confidence: StrictInt = Field(ge=0, le=5)
    response_time_sec: StrictInt | None = Field(default=None, ge=0)

    def to_attempt(self) -> Attempt:
        return Attempt(
            is_correct=self.is_correct,
            confidence=self.confidence,
            question_type=self.question_type,
            response_time_sec=self.response_time_sec or 0,
        )


def validation_error_from(err: PydanticValidationError) -> ValidationError:
    first = err.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    message = f"{field}: {first['msg']}" if field else first["msg"]
    return ValidationError(message, field=field)


class ProgressService:
    """
    Orchestrates the scheduling core.

    The repository and clock are injected; there is no module-level
    storage instance.
    """

    def __init__(
        self,
        repository: ProgressRepository,
        engine: SchedulingEngine | None = None,
        selector: ReviewQueueSelector | None = None,
        clock: Clock | None = None,
        read_workers: int = 2,
    ):
        self.repository = repository
        self.engine = engine or SchedulingEngine()
        self.selector = selector or ReviewQueueSelector()
        self.clock = clock or SystemClock()
        self.read_workers = read_workers

    def record_attempt(
        self,
        user_id: str,
        item_id: int,
        question_type: str,
        is_correct: bool,
        confidence: int,
        response_time_sec: int | None = None,
    ) -> ProgressRecord:
        """
        Record one answer and reschedule the item for the learner.

        Raises:
            ValidationError: malformed payload or confidence outside [0, 5]
            NotFoundError: item_id is not in the catalog
            StorageError: the write failed; prior state is unchanged
        """
        try:
            request = AttemptRequest(
                user_id=user_id,
                item_id=item_id,
                question_type=question_type,
                is_correct=is_correct,
                confidence=confidence,
                response_time_sec=response_time_sec,
            )
        except PydanticValidationError as e:
            raise validation_error_from(e) from e

        if self.repository.get_item(request.item_id) is None:
            raise NotFoundError("Item", request.item_id)

        attempt = request.to_attempt()
        with self.repository.attempt_scope(request.user_id, request.item_id) as scope:
            record, entry = self.engine.update(
                scope.prior,
                attempt,
                user_id=request.user_id,
                item_id=request.item_id,
                now=self.clock.now(),
            )
            scope.upsert(record)
            scope.append_log(entry)

        logger.debug(
            f"Recorded attempt {request.user_id}/{request.item_id}: "
            f"correct={attempt.is_correct} confidence={attempt.confidence} "
            f"level {entry.level_at_attempt}->{record.level} ef={record.easiness_factor} "
            f"next_review={record.next_review_date:%Y-%m-%d %H:%M}"
        )
        return record

    def get_review_queue(self, user_id: str) -> list[QueueEntry]:
        """Active items that are new, unscheduled, or due now."""
        if self.read_workers > 1:
            with ThreadPoolExecutor(
                max_workers=self.read_workers, thread_name_prefix="queue-read"
            ) as pool:
                items_future = pool.submit(self.repository.list_active_items)
                progress_future = pool.submit(self.repository.list_by_user, user_id)
                items = items_future.result()
                progress = progress_future.result()
        else:
            items = self.repository.list_active_items()
            progress = self.repository.list_by_user(user_id)

        progress_by_item = {p.item_id: p for p in progress}
        queue = self.selector.select_due(user_id, items, progress_by_item, self.clock.now())
        logger.info(f"Review queue for {user_id}: {len(queue)} items")
        return queue

    def get_progress(self, user_id: str) -> list[tuple[Item, ProgressRecord]]:
        """Records the learner has, paired with their catalog items."""
        items = {item.id: item for item in self.repository.list_items()}
        return [
            (items[record.item_id], record)
            for record in self.repository.list_by_user(user_id)
            if record.item_id in items
        ]

    def get_history(
        self,
        user_id: str,
        item_id: int | None = None,
        limit: int | None = None,
    ) -> list[AttemptLog]:
        """Attempt log for a learner, newest first."""
        if limit is not None and limit < 1:
            raise ValidationError("limit: must be at least 1", field="limit")
        if item_id is not None and not 1 <= item_id <= MAX_ITEM_ID:
            raise ValidationError("item_id: out of range", field="item_id")
        return self.repository.list_logs(user_id, item_id=item_id, limit=limit)
