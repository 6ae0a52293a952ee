"""Pytest fixtures for testing"""

import pytest

from loan_schedule.config import Settings
from loan_schedule.history import HistoryStore
from loan_schedule_web.app import create_app


@pytest.fixture
def store() -> HistoryStore:
    """In-memory history store"""
    return HistoryStore("sqlite://", max_items=50)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite:///{tmp_path / 'history.sqlite3'}")


@pytest.fixture
def app(settings, store):
    app = create_app(settings, store=store)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
