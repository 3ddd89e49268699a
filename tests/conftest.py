"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from wordwise.catalog import InMemoryItemCatalog, WordEntry
from wordwise.core.clock import FixedClock
from wordwise.repository import InMemoryProgressRepository
from wordwise.service import ProgressService


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (SQLite file database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


START = datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    """Deterministic clock starting at START."""
    return FixedClock(START)


@pytest.fixture
def sample_words():
    """Five active words and one retired word."""
    return [
        WordEntry(id=1, term="Diligent", definition="Careful and hard-working."),
        WordEntry(id=2, term="Ephemeral", definition="Lasting for a very short time."),
        WordEntry(id=3, term="Benevolent", definition="Well meaning and kindly."),
        WordEntry(id=4, term="Tenacious", definition="Keeping a firm hold."),
        WordEntry(id=5, term="Lucid", definition="Easy to understand."),
        WordEntry(id=6, term="Obsolete", definition="No longer used.", status="Retired"),
    ]


@pytest.fixture
def catalog(sample_words):
    return InMemoryItemCatalog(sample_words)


@pytest.fixture
def memory_repo(catalog):
    return InMemoryProgressRepository(catalog)


@pytest.fixture
def service(memory_repo, clock):
    """ProgressService over the in-memory repository."""
    return ProgressService(memory_repo, clock=clock)
