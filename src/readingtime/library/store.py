"""Key-value persistence for books, sessions, goal state and identity."""

from __future__ import annotations

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, TypeVar

from readingtime.errors import PersistenceError

from .models import (
    DEFAULT_GOAL_MINUTES,
    Book,
    DailyGoalState,
    Identity,
    ReadingSession,
)

log = logging.getLogger(__name__)

BOOKS_KEY = "savedBooks"
SESSIONS_KEY = "readingSessions"
GOAL_KEY = "dailyGoal"
READING_TIME_KEY = "dailyReadingTime"
RESET_DATE_KEY = "lastResetDate"
USER_ID_KEY = "userID"
USER_NAME_KEY = "userName"
USER_EMAIL_KEY = "userEmail"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

T = TypeVar("T")


def encode(value: Any) -> str:
    """Stable JSON encoding: same input always yields the same bytes."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class PersistenceGateway(ABC):
    """Whole-collection load/save interface used by the core."""

    @abstractmethod
    def load_books(self) -> list[Book]: ...

    @abstractmethod
    def save_books(self, books: Sequence[Book]) -> None: ...

    @abstractmethod
    def load_sessions(self) -> list[ReadingSession]: ...

    @abstractmethod
    def save_sessions(self, sessions: Sequence[ReadingSession]) -> None: ...

    @abstractmethod
    def load_goal_state(
        self, today: date, default_goal_minutes: float = DEFAULT_GOAL_MINUTES
    ) -> DailyGoalState:
        """Return the stored goal state, or a fresh one dated ``today``."""

    @abstractmethod
    def save_goal_state(self, state: DailyGoalState) -> None: ...

    @abstractmethod
    def load_identity(self) -> Optional[Identity]: ...

    @abstractmethod
    def save_identity(self, identity: Optional[Identity]) -> None: ...


class Store(PersistenceGateway):
    """SQLite-backed key-value store holding JSON-encoded values.

    Decode failures never raise: the affected key loads as empty (or as
    the default goal state) and is recorded in ``decode_failures`` so
    callers can tell corrupt data from no data.
    """

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = db_path
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()
        self.decode_failures: list[str] = []

    def _init_schema(self) -> None:
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    # ── Raw access ─────────────────────────────────────────

    def get_raw(self, key: str) -> Optional[str]:
        try:
            row = self._conn.execute(
                "SELECT value FROM kv WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(key, e) from e
        return row[0] if row else None

    def set_raw(self, key: str, value: str) -> None:
        try:
            self._conn.execute(
                "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", (key, value)
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(key, e) from e

    def delete_raw(self, *keys: str) -> None:
        for key in keys:
            try:
                self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            except sqlite3.Error as e:
                raise PersistenceError(key, e) from e
        self._conn.commit()

    def _decode(self, key: str, default: T, convert: Callable[[Any], T]) -> T:
        raw = self.get_raw(key)
        if raw is None:
            return default
        try:
            return convert(json.loads(raw))
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            log.warning("Could not decode %s, falling back to default: %s", key, e)
            self.decode_failures.append(key)
            return default

    # ── Books ──────────────────────────────────────────────

    def load_books(self) -> list[Book]:
        return self._decode(
            BOOKS_KEY, [], lambda data: [Book.from_dict(d) for d in data]
        )

    def save_books(self, books: Sequence[Book]) -> None:
        self.set_raw(BOOKS_KEY, encode([b.to_dict() for b in books]))

    # ── Reading Sessions ───────────────────────────────────

    def load_sessions(self) -> list[ReadingSession]:
        return self._decode(
            SESSIONS_KEY, [], lambda data: [ReadingSession.from_dict(d) for d in data]
        )

    def save_sessions(self, sessions: Sequence[ReadingSession]) -> None:
        self.set_raw(SESSIONS_KEY, encode([s.to_dict() for s in sessions]))

    # ── Daily Goal ─────────────────────────────────────────

    def load_goal_state(
        self, today: date, default_goal_minutes: float = DEFAULT_GOAL_MINUTES
    ) -> DailyGoalState:
        goal = self._decode(GOAL_KEY, default_goal_minutes, float)
        seconds = self._decode(READING_TIME_KEY, 0.0, float)
        reset = self._decode(RESET_DATE_KEY, today, date.fromisoformat)
        return DailyGoalState(
            last_reset_date=reset,
            daily_goal_minutes=goal,
            accumulated_seconds_today=seconds,
        )

    def save_goal_state(self, state: DailyGoalState) -> None:
        self.set_raw(GOAL_KEY, encode(state.daily_goal_minutes))
        self.set_raw(READING_TIME_KEY, encode(state.accumulated_seconds_today))
        self.set_raw(RESET_DATE_KEY, encode(state.last_reset_date.isoformat()))

    # ── Identity ───────────────────────────────────────────

    def load_identity(self) -> Optional[Identity]:
        user_id = self._decode(USER_ID_KEY, None, str)
        if not user_id:
            return None
        return Identity(
            user_id=user_id,
            display_name=self._decode(USER_NAME_KEY, None, str),
            email=self._decode(USER_EMAIL_KEY, None, str),
        )

    def save_identity(self, identity: Optional[Identity]) -> None:
        if identity is None:
            self.delete_raw(USER_ID_KEY, USER_NAME_KEY, USER_EMAIL_KEY)
            return
        self.set_raw(USER_ID_KEY, encode(identity.user_id))
        for key, value in (
            (USER_NAME_KEY, identity.display_name),
            (USER_EMAIL_KEY, identity.email),
        ):
            if value is None:
                self.delete_raw(key)
            else:
                self.set_raw(key, encode(value))
