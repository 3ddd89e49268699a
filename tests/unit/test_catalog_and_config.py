"""Unit tests for the in-memory catalog, clock helpers and settings."""

from datetime import datetime, timedelta, timezone

import pytest

from wordwise.catalog import DEFAULT_WORDS, InMemoryItemCatalog
from wordwise.config import Settings
from wordwise.core.clock import FixedClock, ensure_utc
from wordwise.core.errors import NotFoundError


class TestInMemoryCatalog:
    def test_active_items_skip_retired(self, catalog):
        assert [i.id for i in catalog.list_active_items()] == [1, 2, 3, 4, 5]
        assert [i.id for i in catalog.list_items()] == [1, 2, 3, 4, 5, 6]

    def test_get_item_reports_status(self, catalog):
        assert catalog.get_item(6).active is False
        assert catalog.get_item(42) is None

    def test_add_word_assigns_next_id(self, catalog):
        word = catalog.add_word("Laconic", "Using very few words.")
        assert word.id == 7
        assert word.active

    def test_set_status_unknown_word(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.set_status(99, "Retired")

    def test_update_word_changes_only_given_fields(self, catalog):
        word = catalog.update_word(2, definition="Short-lived.", phase=2)

        assert word.term == "Ephemeral"
        assert word.definition == "Short-lived."
        assert word.phase == 2
        assert catalog.get_word(2) == word

    def test_update_word_rejects_unknown_field(self, catalog):
        with pytest.raises(ValueError):
            catalog.update_word(2, id=99)

    def test_update_word_unknown_id(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.update_word(99, term="Nope")

    def test_seed_defaults_only_when_empty(self, catalog):
        empty = InMemoryItemCatalog()
        assert empty.seed_defaults() == len(DEFAULT_WORDS)
        assert [w.term for w in empty.list_words()][0] == "Diligent"
        assert empty.seed_defaults() == 0
        assert catalog.seed_defaults() == 0


class TestClock:
    def test_fixed_clock_advances(self):
        clock = FixedClock(datetime(2024, 1, 1, tzinfo=timezone.utc))
        clock.advance(days=2, hours=3)
        assert clock.now() == datetime(2024, 1, 3, 3, tzinfo=timezone.utc)

    def test_ensure_utc(self):
        naive = datetime(2024, 1, 1, 12)
        assert ensure_utc(naive).tzinfo is timezone.utc

        plus_two = datetime(2024, 1, 1, 12, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(plus_two) == datetime(2024, 1, 1, 10, tzinfo=timezone.utc)
        assert ensure_utc(None) is None


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("WORDWISE_DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite:///data/wordwise.db"
        assert settings.sm2_config().second_interval == 6

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("WORDWISE_DATABASE_URL", "sqlite:///:memory:")
        monkeypatch.setenv("WORDWISE_SM2_FIRST_INTERVAL", "2")
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite:///:memory:"
        assert settings.sm2_config().first_interval == 2
