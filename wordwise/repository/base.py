"""
Progress repository contract.

Owns the per-(user, item) progress records and the append-only attempt log.
The only way to change a record as part of an attempt is ``attempt_scope``,
which holds that key's lock from the read of the prior record until the new
record and its log entry are committed together.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

from wordwise.catalog import ItemCatalog
from wordwise.core.errors import StorageError
from wordwise.domain import AttemptLog, Item, ProgressRecord

from .locks import KeyedLock


class AttemptScope:
    """
    Unit of work for one attempt on one key.

    Writes are staged here and applied by the repository when the ``with``
    block exits normally. An exception inside the block discards them.
    """

    def __init__(self, user_id: str, item_id: int, prior: ProgressRecord | None):
        self.user_id = user_id
        self.item_id = item_id
        self.prior = prior
        self.record: ProgressRecord | None = None
        self.logs: list[AttemptLog] = []

    def _check_key(self, user_id: str, item_id: int) -> None:
        if (user_id, item_id) != (self.user_id, self.item_id):
            raise ValueError(
                f"Scope for ({self.user_id}, {self.item_id}) cannot write "
                f"({user_id}, {item_id})"
            )

    def upsert(self, record: ProgressRecord) -> None:
        self._check_key(record.user_id, record.item_id)
        self.record = record

    def append_log(self, entry: AttemptLog) -> None:
        self._check_key(entry.user_id, entry.item_id)
        self.logs.append(entry)

    @property
    def has_writes(self) -> bool:
        return self.record is not None or bool(self.logs)

    def ensure_paired(self) -> None:
        """A record without its log entry (or the reverse) is never committed."""
        if self.has_writes and (self.record is None or not self.logs):
            raise StorageError(
                f"Attempt on ({self.user_id}, {self.item_id}) must write both "
                "the progress record and its log entry"
            )


class ProgressRepository(ABC):
    """Persisted progress records plus attempt audit log."""

    def __init__(self, catalog: ItemCatalog):
        self.catalog = catalog
        self._key_locks = KeyedLock()

    # =========================================================================
    # Catalog delegation
    # =========================================================================

    def list_active_items(self) -> list[Item]:
        return self.catalog.list_active_items()

    def list_items(self) -> list[Item]:
        return self.catalog.list_items()

    def get_item(self, item_id: int) -> Item | None:
        return self.catalog.get_item(item_id)

    # =========================================================================
    # Atomic attempt cycle
    # =========================================================================

    @contextmanager
    def attempt_scope(self, user_id: str, item_id: int) -> Iterator[AttemptScope]:
        """
        Read-modify-write scope for a single (user, item) key.

        Usage:
            with repo.attempt_scope(user_id, item_id) as scope:
                record, entry = engine.update(scope.prior, attempt, ...)
                scope.upsert(record)
                scope.append_log(entry)
        """
        with self._key_locks.hold((user_id, item_id)):
            with self._transaction(user_id, item_id) as scope:
                yield scope

    @abstractmethod
    def _transaction(self, user_id: str, item_id: int) -> AbstractContextManager[AttemptScope]:
        """Load the prior record, yield a scope, commit its writes all-or-nothing."""

    # =========================================================================
    # Single operations
    # =========================================================================

    @abstractmethod
    def get(self, user_id: str, item_id: int) -> ProgressRecord | None: ...

    def upsert(self, record: ProgressRecord) -> None:
        """Write a record outside an attempt (imports, repairs). No log entry."""
        with self._key_locks.hold(record.key):
            self._write_record(record)

    @abstractmethod
    def _write_record(self, record: ProgressRecord) -> None: ...

    @abstractmethod
    def append_log(self, entry: AttemptLog) -> None: ...

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[ProgressRecord]: ...

    @abstractmethod
    def list_all(self) -> list[ProgressRecord]: ...

    @abstractmethod
    def list_logs(
        self,
        user_id: str,
        item_id: int | None = None,
        limit: int | None = None,
    ) -> list[AttemptLog]:
        """Attempt history for a user, most recent first."""
