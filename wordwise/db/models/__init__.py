# SQLAlchemy models
from .base import Base
from .catalog import ACTIVE_STATUS, Word
from .progress import AttemptLogEntry, StudentProgress

__all__ = [
    "Base",
    "Word",
    "ACTIVE_STATUS",
    "StudentProgress",
    "AttemptLogEntry",
]
