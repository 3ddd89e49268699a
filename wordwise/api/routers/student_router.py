"""
Student router.

Review queue, attempt recording and progress for the calling learner.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from wordwise.api.dependencies import current_user, get_services
from wordwise.api.schemas import (
    AttemptIn,
    AttemptLogOut,
    ProgressEntryOut,
    ProgressOut,
    QueueEntryOut,
    WordOut,
)
from wordwise.bootstrap import Services
from wordwise.domain import MAX_ITEM_ID

router = APIRouter()


def _word_lookup(services: Services) -> dict[int, WordOut]:
    return {w.id: WordOut.from_entry(w) for w in services.catalog.list_words()}


@router.get("/queue", response_model=list[QueueEntryOut], summary="Get review queue")
def get_review_queue(
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
) -> list[QueueEntryOut]:
    """
    Words due for the learner: never attempted, never scheduled, or past
    their next review date. No particular order is guaranteed.
    """
    queue = services.progress.get_review_queue(user_id)
    words = _word_lookup(services)
    return [
        QueueEntryOut(
            word=words[item.id],
            progress=ProgressOut.from_record(progress) if progress else None,
        )
        for item, progress in queue
        if item.id in words
    ]


@router.post("/attempts", response_model=ProgressOut, summary="Record attempt")
def record_attempt(
    body: AttemptIn,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
) -> ProgressOut:
    record = services.progress.record_attempt(
        user_id=user_id,
        item_id=body.item_id,
        question_type=body.question_type,
        is_correct=body.is_correct,
        confidence=body.confidence,
        response_time_sec=body.response_time_sec,
    )
    return ProgressOut.from_record(record)


@router.get("/progress", response_model=list[ProgressEntryOut], summary="Get my progress")
def get_my_progress(
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
) -> list[ProgressEntryOut]:
    words = _word_lookup(services)
    return [
        ProgressEntryOut(word=words[item.id], progress=ProgressOut.from_record(record))
        for item, record in services.progress.get_progress(user_id)
        if item.id in words
    ]


@router.get("/history", response_model=list[AttemptLogOut], summary="Get attempt history")
def get_history(
    item_id: int | None = Query(None, ge=1, le=MAX_ITEM_ID, description="Only this word"),
    limit: int = Query(50, ge=1, le=500, description="Number of attempts to return"),
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
) -> list[AttemptLogOut]:
    logs = services.progress.get_history(user_id, item_id=item_id, limit=limit)
    return [AttemptLogOut.from_log(e) for e in logs]
