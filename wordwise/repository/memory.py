"""Dictionary-backed repository for tests, demos and simulations."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

from wordwise.catalog import ItemCatalog
from wordwise.domain import AttemptLog, ProgressRecord

from .base import AttemptScope, ProgressRepository


class InMemoryProgressRepository(ProgressRepository):
    def __init__(self, catalog: ItemCatalog):
        super().__init__(catalog)
        self._data_lock = threading.Lock()
        self._records: dict[tuple[str, int], ProgressRecord] = {}
        self._logs: list[AttemptLog] = []

    @contextmanager
    def _transaction(self, user_id: str, item_id: int) -> Iterator[AttemptScope]:
        scope = AttemptScope(user_id, item_id, self.get(user_id, item_id))
        yield scope
        scope.ensure_paired()
        if scope.has_writes:
            self._commit(scope.record, scope.logs)

    def _commit(self, record: ProgressRecord, logs: list[AttemptLog]) -> None:
        with self._data_lock:
            self._records[record.key] = replace(record)
            self._logs.extend(logs)

    def get(self, user_id: str, item_id: int) -> ProgressRecord | None:
        with self._data_lock:
            record = self._records.get((user_id, item_id))
            return replace(record) if record else None

    def _write_record(self, record: ProgressRecord) -> None:
        with self._data_lock:
            self._records[record.key] = replace(record)

    def append_log(self, entry: AttemptLog) -> None:
        with self._data_lock:
            self._logs.append(entry)

    def list_by_user(self, user_id: str) -> list[ProgressRecord]:
        with self._data_lock:
            return [
                replace(r)
                for (uid, _), r in sorted(self._records.items())
                if uid == user_id
            ]

    def list_all(self) -> list[ProgressRecord]:
        with self._data_lock:
            return [replace(r) for _, r in sorted(self._records.items())]

    def list_logs(
        self,
        user_id: str,
        item_id: int | None = None,
        limit: int | None = None,
    ) -> list[AttemptLog]:
        with self._data_lock:
            logs = [
                e
                for e in reversed(self._logs)
                if e.user_id == user_id and (item_id is None or e.item_id == item_id)
            ]
        return logs[:limit] if limit is not None else logs
