"""
Error taxonomy for wordwise.

Validation and lookup failures are raised before any state is touched.
Storage failures are raised after the failed transaction has been rolled
back; the core never retries them.
"""

from __future__ import annotations


class WordwiseError(Exception):
    """Base class for all wordwise errors."""


class ValidationError(WordwiseError):
    """Malformed attempt payload or out-of-range value."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(WordwiseError):
    """Referenced item does not exist in the catalog."""

    def __init__(self, resource: str, identifier: object):
        super().__init__(f"{resource} {identifier} not found")
        self.resource = resource
        self.identifier = identifier


class StorageError(WordwiseError):
    """Repository I/O failure. Prior state is left unchanged."""
