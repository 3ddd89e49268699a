from .database import Database, create_db_engine
from .models import ACTIVE_STATUS, AttemptLogEntry, Base, StudentProgress, Word

__all__ = [
    "Database",
    "create_db_engine",
    "Base",
    "Word",
    "ACTIVE_STATUS",
    "StudentProgress",
    "AttemptLogEntry",
]
