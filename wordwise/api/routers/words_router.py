"""
Words router.

Vocabulary catalog access and management. Deleting a word also removes
every learner's progress and attempt history for it.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path, Response
from loguru import logger

from wordwise.api.dependencies import get_services
from wordwise.api.schemas import WordCreate, WordOut, WordUpdate
from wordwise.bootstrap import Services
from wordwise.domain import MAX_ITEM_ID

router = APIRouter()


@router.get("", response_model=list[WordOut], summary="List words")
def list_words(services: Services = Depends(get_services)) -> list[WordOut]:
    return [WordOut.from_entry(w) for w in services.catalog.list_words()]


@router.get("/{word_id}", response_model=WordOut, summary="Get word")
def get_word(
    word_id: int = Path(..., ge=1, le=MAX_ITEM_ID),
    services: Services = Depends(get_services),
) -> WordOut:
    word = services.catalog.get_word(word_id)
    if word is None:
        raise HTTPException(status_code=404, detail="Word not found")
    return WordOut.from_entry(word)


@router.post("", response_model=WordOut, status_code=201, summary="Create word")
def create_word(body: WordCreate, services: Services = Depends(get_services)) -> WordOut:
    word = services.catalog.add_word(**body.model_dump())
    logger.info(f"Created word {word.id}: {word.term}")
    return WordOut.from_entry(word)


@router.put("/{word_id}", response_model=WordOut, summary="Update word")
def update_word(
    body: WordUpdate,
    word_id: int = Path(..., ge=1, le=MAX_ITEM_ID),
    services: Services = Depends(get_services),
) -> WordOut:
    """Change only the fields present in the body."""
    word = services.catalog.update_word(word_id, **body.model_dump(exclude_none=True))
    logger.info(f"Updated word {word.id}: {word.term} ({word.status})")
    return WordOut.from_entry(word)


@router.delete("/{word_id}", status_code=204, summary="Delete word")
def delete_word(
    word_id: int = Path(..., ge=1, le=MAX_ITEM_ID),
    services: Services = Depends(get_services),
) -> Response:
    services.catalog.delete_word(word_id)
    return Response(status_code=204)
