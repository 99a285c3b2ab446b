"""Shared fixtures for the expense tracker tests."""

import logging
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, text

from common.config import get_settings
from common.storage import ExpenseStore

SCHEMA = """
CREATE TABLE expensetable (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    description TEXT NOT NULL,
    amount INTEGER NOT NULL CHECK (amount >= 0),
    date TEXT NOT NULL
)
"""


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep stray .env files, env vars and log handlers out of every test."""
    monkeypatch.chdir(tmp_path)
    for name in ("DB_URL", "DB_TABLE", "DEBUG"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    get_settings.cache_clear()


@pytest.fixture
def db_url(tmp_path):
    """URL of a fresh SQLite database holding an empty expense table."""
    url = f"sqlite:///{tmp_path / 'expenses.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.execute(text(SCHEMA))
    engine.dispose()
    return url


@pytest.fixture
def store(db_url):
    store = ExpenseStore(db_url)
    yield store
    store.stop()


@pytest.fixture
def mock_engine(monkeypatch):
    """Replace the engine factory; returns the engine and its connection."""
    engine = MagicMock(name="engine")
    conn = MagicMock(name="connection")
    engine.begin.return_value.__enter__.return_value = conn
    engine.connect.return_value.__enter__.return_value = conn
    factory = MagicMock(return_value=engine)
    monkeypatch.setattr("common.storage.create_engine", factory)
    return engine, conn
