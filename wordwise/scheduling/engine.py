"""
SM-2 Scheduling Engine.

Maps (prior progress, attempt facts) to (new progress, audit entry). The
engine is a pure function of its inputs: the caller passes ``now`` and
nothing is read from or written to storage here.

Quality scale used for easiness and streak updates:
0 - Incorrect, low confidence (0-2)
1 - Incorrect, confidence 3
2 - Incorrect, but high confidence (4-5)
3 - Correct, confidence 3
4 - Correct, confidence 4
5 - Correct, confidence 5

Correct answers given with confidence below 3 score below 3 and therefore
count as relapses.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from wordwise.domain import Attempt, AttemptLog, ProgressRecord

# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class SM2Config:
    """Configuration for the SM-2 variant."""

    initial_easiness: float = 2.5
    minimum_easiness: float = 1.3
    maximum_easiness: float = 2.5
    first_interval: int = 1  # Days after the first passing attempt
    second_interval: int = 6  # Days after the second passing attempt
    relapse_interval: int = 1  # Days after a failing attempt
    repeat_factor: int = 2  # Multiplier once the record has been scheduled before
    passing_quality: int = 3
    max_level: int = 5
    easiness_precision: int = 2  # Decimal places kept on the persisted EF


# =============================================================================
# Quality
# =============================================================================


def quality_from_attempt(is_correct: bool, confidence: int) -> int:
    """
    Convert an attempt to an SM-2 quality score.

    A correct answer scores its confidence. An incorrect answer still earns
    partial quality when the learner was confident, since they likely
    half-knew it.
    """
    if is_correct:
        return confidence
    if confidence >= 4:
        return 2
    if confidence == 3:
        return 1
    return 0


def easiness_delta(quality: int) -> float:
    """EF' - EF = 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)"""
    miss = 5 - quality
    return 0.1 - miss * (0.08 + miss * 0.02)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# =============================================================================
# Engine
# =============================================================================


@dataclass(frozen=True)
class ScheduleDecision:
    """Intermediate values of one update, exposed for logging and tests."""

    quality: int
    easiness_factor: float
    streak: int
    interval_days: int
    level: int


class SchedulingEngine:
    """
    Stateless SM-2 variant used to schedule vocabulary reviews.

    Each (user, item) pair carries:
    - Easiness Factor (EF): 2.5 default, clamped to [1.3, 2.5]
    - Streak: consecutive attempts with quality >= 3
    - Level: 1-5, derived from the streak (one level per two passes)

    The interval after the third pass is ``round(factor * EF')`` where the
    factor is 2 if the record was already scheduled and 1 otherwise. This is
    not the canonical SM-2 ``previous_interval * EF`` and is kept as is.
    """

    def __init__(self, config: SM2Config | None = None):
        self.config = config or SM2Config()

    def decide(self, prior: ProgressRecord | None, attempt: Attempt) -> ScheduleDecision:
        """
        Compute quality, EF, streak, interval and level for an attempt.

        Args:
            prior: Existing progress, or None for a first attempt
            attempt: Raw attempt facts (confidence already validated)

        Returns:
            ScheduleDecision with the new values
        """
        cfg = self.config
        quality = quality_from_attempt(attempt.is_correct, attempt.confidence)

        prior_ef = prior.easiness_factor if prior is not None else cfg.initial_easiness
        prior_streak = prior.consecutive_correct if prior is not None else 0

        new_ef = prior_ef + easiness_delta(quality)
        new_ef = max(cfg.minimum_easiness, min(cfg.maximum_easiness, new_ef))

        passed = quality >= cfg.passing_quality
        new_streak = prior_streak + 1 if passed else 0

        if not passed:
            interval = cfg.relapse_interval
        elif new_streak == 1:
            interval = cfg.first_interval
        elif new_streak == 2:
            interval = cfg.second_interval
        else:
            scheduled_before = prior is not None and prior.next_review_date is not None
            factor = cfg.repeat_factor if scheduled_before else 1
            interval = _round_half_up(factor * new_ef)

        level = min(cfg.max_level, new_streak // 2 + 1)

        return ScheduleDecision(
            quality=quality,
            easiness_factor=new_ef,
            streak=new_streak,
            interval_days=interval,
            level=level,
        )

    def update(
        self,
        prior: ProgressRecord | None,
        attempt: Attempt,
        *,
        user_id: str,
        item_id: int,
        now: datetime,
    ) -> tuple[ProgressRecord, AttemptLog]:
        """
        Apply an attempt to the prior progress.

        Args:
            prior: Existing progress, or None if the learner never tried the item
            attempt: Raw attempt facts
            user_id: Learner the attempt belongs to
            item_id: Item that was answered
            now: Time of the attempt (drives last-attempt and next-review dates)

        Returns:
            (new ProgressRecord, AttemptLog entry carrying the pre-update level)
        """
        decision = self.decide(prior, attempt)

        if prior is None:
            total_attempts = total_correct = 0
            level_before = 1
            first_learned = now
        else:
            total_attempts = prior.total_attempts
            total_correct = prior.total_correct
            level_before = prior.level
            first_learned = prior.first_learned_date

        record = ProgressRecord(
            user_id=user_id,
            item_id=item_id,
            level=decision.level,
            total_attempts=total_attempts + 1,
            total_correct=total_correct + (1 if attempt.is_correct else 0),
            easiness_factor=round(decision.easiness_factor, self.config.easiness_precision),
            consecutive_correct=decision.streak,
            last_attempt_date=now,
            first_learned_date=first_learned,
            next_review_date=now + timedelta(days=decision.interval_days),
        )

        entry = AttemptLog(
            user_id=user_id,
            item_id=item_id,
            attempt_date=now,
            question_type=attempt.question_type,
            is_correct=attempt.is_correct,
            confidence=attempt.confidence,
            response_time_sec=attempt.response_time_sec,
            level_at_attempt=level_before,
        )

        return record, entry
