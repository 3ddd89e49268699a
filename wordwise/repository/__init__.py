"""
Progress persistence.

Components:
- ProgressRepository: contract with the atomic ``attempt_scope``
- SqlProgressRepository: SQLAlchemy implementation
- InMemoryProgressRepository: dictionary implementation
- KeyedLock: per-key mutual exclusion used by both
"""

from .base import AttemptScope, ProgressRepository
from .locks import KeyedLock
from .memory import InMemoryProgressRepository
from .sql import SqlProgressRepository

__all__ = [
    "ProgressRepository",
    "AttemptScope",
    "KeyedLock",
    "InMemoryProgressRepository",
    "SqlProgressRepository",
]
