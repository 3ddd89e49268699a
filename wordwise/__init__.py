"""
wordwise: spaced-repetition scheduling for vocabulary practice.

Components:
- SchedulingEngine: SM-2 variant, pure per-attempt update
- ReviewQueueSelector: due-item selection
- ProgressRepository: per-key atomic progress + attempt log persistence
- ProgressService: record_attempt / get_review_queue / get_progress
- StatsAggregator: dashboard roll-ups
"""

from .catalog import InMemoryItemCatalog, ItemCatalog, SqlItemCatalog, WordEntry
from .core import FixedClock, NotFoundError, StorageError, SystemClock, ValidationError
from .domain import Attempt, AttemptLog, Item, ProgressRecord
from .repository import InMemoryProgressRepository, ProgressRepository, SqlProgressRepository
from .scheduling import ReviewQueueSelector, SchedulingEngine, SM2Config
from .service import ProgressService
from .stats import StatsAggregator

__version__ = "1.0.0"

__all__ = [
    # Domain
    "Item",
    "Attempt",
    "AttemptLog",
    "ProgressRecord",
    # Scheduling
    "SchedulingEngine",
    "SM2Config",
    "ReviewQueueSelector",
    # Persistence
    "ProgressRepository",
    "InMemoryProgressRepository",
    "SqlProgressRepository",
    "ItemCatalog",
    "InMemoryItemCatalog",
    "SqlItemCatalog",
    "WordEntry",
    # Service
    "ProgressService",
    "StatsAggregator",
    # Support
    "FixedClock",
    "SystemClock",
    "ValidationError",
    "NotFoundError",
    "StorageError",
]
