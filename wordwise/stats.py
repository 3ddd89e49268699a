"""Summary counts for the teacher dashboard."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

from wordwise.catalog import ItemCatalog
from wordwise.domain import ProgressRecord
from wordwise.repository import ProgressRepository

MASTERED_LEVEL = 5


@dataclass
class SystemStats:
    total_words: int
    total_attempts: int
    mastered_count: int
    learning_count: int
    level_counts: dict[int, int] = field(default_factory=dict)


@dataclass
class StudentStats:
    user_id: str
    mastered_count: int
    learning_count: int
    total_attempts: int
    total_correct: int

    @property
    def accuracy(self) -> float:
        """Percent of attempts answered correctly."""
        if self.total_attempts == 0:
            return 0.0
        return self.total_correct / self.total_attempts * 100


def _bucket(record: ProgressRecord) -> str | None:
    if record.level >= MASTERED_LEVEL:
        return "mastered"
    if record.level > 1:
        return "learning"
    return None


class StatsAggregator:
    """Read-only roll-ups over the progress repository."""

    def __init__(self, repository: ProgressRepository, catalog: ItemCatalog):
        self.repository = repository
        self.catalog = catalog

    def system_stats(self) -> SystemStats:
        records = self.repository.list_all()
        stats = SystemStats(
            total_words=len(self.catalog.list_words()),
            total_attempts=sum(r.total_attempts for r in records),
            mastered_count=0,
            learning_count=0,
            level_counts={level: 0 for level in range(1, MASTERED_LEVEL + 1)},
        )
        for record in records:
            stats.level_counts[record.level] = stats.level_counts.get(record.level, 0) + 1
            bucket = _bucket(record)
            if bucket == "mastered":
                stats.mastered_count += 1
            elif bucket == "learning":
                stats.learning_count += 1
        return stats

    def student_stats(self) -> list[StudentStats]:
        by_user: dict[str, list[ProgressRecord]] = defaultdict(list)
        for record in self.repository.list_all():
            by_user[record.user_id].append(record)

        return [
            StudentStats(
                user_id=user_id,
                mastered_count=sum(1 for r in records if _bucket(r) == "mastered"),
                learning_count=sum(1 for r in records if _bucket(r) == "learning"),
                total_attempts=sum(r.total_attempts for r in records),
                total_correct=sum(r.total_correct for r in records),
            )
            for user_id, records in sorted(by_user.items())
        ]
