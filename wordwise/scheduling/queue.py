"""Due-item selection for a learner's review queue."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from loguru import logger

from wordwise.domain import Item, ProgressRecord

QueueEntry = tuple[Item, ProgressRecord | None]


class ReviewQueueSelector:
    """
    Picks the items a learner should see now.

    An active item is due when it has no progress record, when its record
    was never scheduled, or when its next review date has arrived. The
    result keeps catalog order and never repeats an item.
    """

    def select_due(
        self,
        user_id: str,
        active_items: Iterable[Item],
        progress_by_item: Mapping[int, ProgressRecord],
        now: datetime,
    ) -> list[QueueEntry]:
        due: list[QueueEntry] = []
        seen: set[int] = set()

        for item in active_items:
            if item.id in seen or not item.active:
                continue
            seen.add(item.id)

            progress = progress_by_item.get(item.id)
            if progress is None or progress.is_due(now):
                due.append((item, progress))

        new_count = sum(1 for _, p in due if p is None)
        logger.debug(
            f"Queue for {user_id}: {len(due)} due ({new_count} new) of {len(seen)} active items"
        )
        return due
