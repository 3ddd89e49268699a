"""
Scheduling: the SM-2 update rule and due-item selection.

Components:
- SchedulingEngine: pure per-attempt state update
- ReviewQueueSelector: due-set for a learner
"""

from .engine import (
    SchedulingEngine,
    ScheduleDecision,
    SM2Config,
    easiness_delta,
    quality_from_attempt,
)
from .queue import QueueEntry, ReviewQueueSelector

__all__ = [
    "SchedulingEngine",
    "ScheduleDecision",
    "SM2Config",
    "easiness_delta",
    "quality_from_attempt",
    "ReviewQueueSelector",
    "QueueEntry",
]
