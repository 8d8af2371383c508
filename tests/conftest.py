"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import os
import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Tests never touch the developer's database or log files
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE", "")


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (in-memory database)")
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


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed reference time for scheduling tests."""
    return datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_card(now):
    """Factory for cards with sensible defaults."""
    from lingua.core.card import CardModel

    def _make(front="Hund", back="dog", language="de", category="animals", **kwargs):
        kwargs.setdefault("now", now)
        return CardModel.create(front_text=front, back_text=back, language=language, category=category, **kwargs)

    return _make


@pytest.fixture
def deck(make_card):
    """Four German cards, enough for multiple choice."""
    return [
        make_card("der Hund", "dog"),
        make_card("die Katze", "cat"),
        make_card("das Haus", "house", category="home"),
        make_card("laufen", "to run", category="verbs"),
    ]


@pytest.fixture
def database():
    """Fresh in-memory database with all tables."""
    from lingua.db import database as db

    db.configure_database("sqlite://")
    db.init_db()
    yield db
    db.drop_db()


@pytest.fixture
def db_session(database):
    """Session on the in-memory database; committed on success."""
    with database.session_scope() as session:
        yield session


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    """Each test starts with empty rate limit windows."""
    from lingua.services.card_service import default_rate_limiter

    default_rate_limiter.clear_all()
    yield
    default_rate_limiter.clear_all()
