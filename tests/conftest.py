"""Shared fixtures for tests."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from readingtime.config import AppConfig
from readingtime.errors import PersistenceError
from readingtime.library.catalog import BookCatalog
from readingtime.library.models import Book
from readingtime.library.sessions import SessionLog
from readingtime.library.store import Store
from readingtime.tracking.events import EventBus
from readingtime.tracking.goal import GoalTracker


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def make_book(
    title: str = "Test Book",
    author: str = "Author",
    total_pages: int = 300,
    current_page: int = 0,
) -> Book:
    return Book(
        title=title, author=author, total_pages=total_pages, current_page=current_page
    )


@pytest.fixture
def store(tmp_path: Path) -> Store:
    s = Store(tmp_path / "test.db")
    yield s
    s.close()


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        data_dir=tmp_path / "data",
        config_dir=tmp_path / "config",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 10, 9, 0, 0))


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def catalog(store: Store, bus: EventBus) -> BookCatalog:
    return BookCatalog(store, bus)


@pytest.fixture
def sessions(store: Store) -> SessionLog:
    return SessionLog(store)


@pytest.fixture
def tracker(
    store: Store,
    catalog: BookCatalog,
    sessions: SessionLog,
    bus: EventBus,
    clock: FakeClock,
) -> GoalTracker:
    return GoalTracker(store, catalog, sessions, bus=bus, clock=clock)


def fail_writes(monkeypatch: pytest.MonkeyPatch, store: Store, method: str) -> None:
    """Make ``store.<method>`` raise as if the disk were full."""
    key = {"save_books": "savedBooks", "save_sessions": "readingSessions"}[method]

    def broken(*args, **kwargs):
        raise PersistenceError(key, sqlite3.OperationalError("database or disk is full"))

    monkeypatch.setattr(store, method, broken)
