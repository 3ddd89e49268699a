from .clock import Clock, FixedClock, SystemClock, ensure_utc
from .errors import NotFoundError, StorageError, ValidationError, WordwiseError
from .log import configure_logging

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "ensure_utc",
    "WordwiseError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "configure_logging",
]
