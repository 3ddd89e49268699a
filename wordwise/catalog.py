"""
Vocabulary catalog.

The scheduling core only needs ``list_active_items`` and ``get_item``. The
remaining operations manage words for seeding, the CLI and the HTTP API.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from wordwise.core.errors import NotFoundError, StorageError
from wordwise.db.database import Database
from wordwise.db.models import ACTIVE_STATUS, Word
from wordwise.domain import Item


@dataclass(frozen=True)
class WordEntry:
    """Full catalog record for a word."""

    id: int
    term: str
    definition: str
    part_of_speech: str | None = None
    example_sentence: str | None = None
    phase: int = 1
    status: str = ACTIVE_STATUS

    @property
    def active(self) -> bool:
        return self.status == ACTIVE_STATUS

    def as_item(self) -> Item:
        return Item(id=self.id, active=self.active)


EDITABLE_FIELDS = frozenset(
    {"term", "definition", "part_of_speech", "example_sentence", "phase", "status"}
)


def _check_fields(changes: dict) -> None:
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")


DEFAULT_WORDS: list[dict] = [
    {
        "term": "Diligent",
        "definition": "Having or showing care and conscientiousness in one's work or duties.",
        "part_of_speech": "Adjective",
        "example_sentence": "She was a diligent student, always completing her assignments on time.",
    },
    {
        "term": "Ephemeral",
        "definition": "Lasting for a very short time.",
        "part_of_speech": "Adjective",
        "example_sentence": "Fashions are ephemeral.",
    },
    {
        "term": "Benevolent",
        "definition": "Well meaning and kindly.",
        "part_of_speech": "Adjective",
        "example_sentence": "A benevolent smile.",
    },
    {
        "term": "Tenacious",
        "definition": "Tending to keep a firm hold of something; clinging or adhering closely.",
        "part_of_speech": "Adjective",
        "example_sentence": "A tenacious grip.",
    },
    {
        "term": "Lucid",
        "definition": "Expressed clearly; easy to understand.",
        "part_of_speech": "Adjective",
        "example_sentence": "A lucid account.",
    },
]


class ItemCatalog(ABC):
    """Source of learnable items."""

    @abstractmethod
    def list_words(self) -> list[WordEntry]: ...

    @abstractmethod
    def get_word(self, word_id: int) -> WordEntry | None: ...

    @abstractmethod
    def add_word(
        self,
        term: str,
        definition: str,
        part_of_speech: str | None = None,
        example_sentence: str | None = None,
        phase: int = 1,
        status: str = ACTIVE_STATUS,
    ) -> WordEntry: ...

    @abstractmethod
    def update_word(self, word_id: int, **changes) -> WordEntry:
        """Apply a partial update. Raises NotFoundError for an unknown id."""

    def set_status(self, word_id: int, status: str) -> WordEntry:
        return self.update_word(word_id, status=status)

    @abstractmethod
    def delete_word(self, word_id: int) -> None: ...

    def list_items(self) -> list[Item]:
        """Every item, active or not."""
        return [w.as_item() for w in self.list_words()]

    def list_active_items(self) -> list[Item]:
        return [w.as_item() for w in self.list_words() if w.active]

    def get_item(self, item_id: int) -> Item | None:
        word = self.get_word(item_id)
        return word.as_item() if word else None

    def seed_defaults(self) -> int:
        """Insert the starter vocabulary when the catalog is empty."""
        if self.list_words():
            return 0
        for entry in DEFAULT_WORDS:
            self.add_word(**entry)
        logger.info(f"Seeded {len(DEFAULT_WORDS)} starter words")
        return len(DEFAULT_WORDS)


class InMemoryItemCatalog(ItemCatalog):
    def __init__(self, words: list[WordEntry] | None = None):
        self._lock = threading.Lock()
        self._words: dict[int, WordEntry] = {w.id: w for w in words or []}
        self._next_id = max(self._words, default=0) + 1

    def list_words(self) -> list[WordEntry]:
        with self._lock:
            return sorted(self._words.values(), key=lambda w: w.id)

    def get_word(self, word_id: int) -> WordEntry | None:
        with self._lock:
            return self._words.get(word_id)

    def add_word(
        self,
        term: str,
        definition: str,
        part_of_speech: str | None = None,
        example_sentence: str | None = None,
        phase: int = 1,
        status: str = ACTIVE_STATUS,
    ) -> WordEntry:
        with self._lock:
            entry = WordEntry(
                id=self._next_id,
                term=term,
                definition=definition,
                part_of_speech=part_of_speech,
                example_sentence=example_sentence,
                phase=phase,
                status=status,
            )
            self._words[entry.id] = entry
            self._next_id += 1
            return entry

    def update_word(self, word_id: int, **changes) -> WordEntry:
        _check_fields(changes)
        with self._lock:
            if word_id not in self._words:
                raise NotFoundError("Word", word_id)
            entry = replace(self._words[word_id], **changes)
            self._words[word_id] = entry
            return entry

    def delete_word(self, word_id: int) -> None:
        with self._lock:
            self._words.pop(word_id, None)


class SqlItemCatalog(ItemCatalog):
    """Catalog backed by the ``words`` table."""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _to_entry(row: Word) -> WordEntry:
        return WordEntry(
            id=row.id,
            term=row.term,
            definition=row.definition,
            part_of_speech=row.part_of_speech,
            example_sentence=row.example_sentence,
            phase=row.phase if row.phase is not None else 1,
            status=row.status or ACTIVE_STATUS,
        )

    def list_words(self) -> list[WordEntry]:
        try:
            with self.db.session_scope() as session:
                rows = session.scalars(select(Word).order_by(Word.id)).all()
                return [self._to_entry(r) for r in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list words: {e}") from e

    def list_active_items(self) -> list[Item]:
        try:
            with self.db.session_scope() as session:
                ids = session.scalars(
                    select(Word.id).where(Word.status == ACTIVE_STATUS).order_by(Word.id)
                ).all()
                return [Item(id=i, active=True) for i in ids]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list active items: {e}") from e

    def get_word(self, word_id: int) -> WordEntry | None:
        try:
            with self.db.session_scope() as session:
                row = session.get(Word, word_id)
                return self._to_entry(row) if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load word {word_id}: {e}") from e

    def add_word(
        self,
        term: str,
        definition: str,
        part_of_speech: str | None = None,
        example_sentence: str | None = None,
        phase: int = 1,
        status: str = ACTIVE_STATUS,
    ) -> WordEntry:
        try:
            with self.db.session_scope() as session:
                row = Word(
                    term=term,
                    definition=definition,
                    part_of_speech=part_of_speech,
                    example_sentence=example_sentence,
                    phase=phase,
                    status=status,
                )
                session.add(row)
                session.flush()
                entry = self._to_entry(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to add word {term!r}: {e}") from e
        logger.debug(f"Added word {entry.id}: {entry.term}")
        return entry

    def update_word(self, word_id: int, **changes) -> WordEntry:
        _check_fields(changes)
        try:
            with self.db.session_scope() as session:
                row = session.get(Word, word_id)
                if row is None:
                    raise NotFoundError("Word", word_id)
                for name, value in changes.items():
                    setattr(row, name, value)
                session.flush()
                return self._to_entry(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update word {word_id}: {e}") from e

    def delete_word(self, word_id: int) -> None:
        """Delete a word; its progress rows and attempt logs go with it."""
        try:
            with self.db.session_scope() as session:
                row = session.get(Word, word_id)
                if row is not None:
                    session.delete(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete word {word_id}: {e}") from e
        logger.info(f"Deleted word {word_id}")
