"""Unit tests for StatsAggregator."""

import pytest

from wordwise.domain import ProgressRecord
from wordwise.stats import StatsAggregator, StudentStats


def _seed(repo, user_id, item_id, level, attempts, correct):
    repo.upsert(
        ProgressRecord(
            user_id=user_id,
            item_id=item_id,
            level=level,
            total_attempts=attempts,
            total_correct=correct,
        )
    )


@pytest.fixture
def stats(memory_repo, catalog):
    return StatsAggregator(memory_repo, catalog)


class TestSystemStats:
    def test_empty(self, stats):
        result = stats.system_stats()

        assert result.total_words == 6
        assert result.total_attempts == 0
        assert result.mastered_count == 0
        assert result.learning_count == 0
        assert result.level_counts == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_buckets_by_level(self, stats, memory_repo):
        _seed(memory_repo, "a", 1, level=5, attempts=10, correct=9)
        _seed(memory_repo, "a", 2, level=1, attempts=2, correct=0)
        _seed(memory_repo, "b", 1, level=3, attempts=4, correct=3)
        _seed(memory_repo, "b", 2, level=2, attempts=3, correct=2)

        result = stats.system_stats()

        assert result.total_attempts == 19
        assert result.mastered_count == 1
        assert result.learning_count == 2
        assert result.level_counts == {1: 1, 2: 1, 3: 1, 4: 0, 5: 1}


class TestStudentStats:
    def test_per_user_rollup_sorted(self, stats, memory_repo):
        _seed(memory_repo, "zoe", 1, level=5, attempts=4, correct=4)
        _seed(memory_repo, "adam", 1, level=2, attempts=3, correct=1)
        _seed(memory_repo, "adam", 2, level=1, attempts=1, correct=0)

        result = stats.student_stats()

        assert [s.user_id for s in result] == ["adam", "zoe"]
        adam, zoe = result
        assert adam.learning_count == 1
        assert adam.mastered_count == 0
        assert adam.total_attempts == 4
        assert adam.accuracy == pytest.approx(25.0)
        assert zoe.mastered_count == 1
        assert zoe.accuracy == pytest.approx(100.0)

    def test_accuracy_without_attempts(self):
        assert StudentStats("u", 0, 0, 0, 0).accuracy == 0.0

    def test_no_students(self, stats):
        assert stats.student_stats() == []
