"""Append-only log of reading sessions."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Iterator

from readingtime.errors import ValidationError

from .models import ReadingSession
from .store import PersistenceGateway

log = logging.getLogger(__name__)


class SessionView:
    """Restartable, lazily filtered view over a session snapshot."""

    def __init__(
        self, sessions: tuple[ReadingSession, ...], start: datetime, end: datetime
    ) -> None:
        self._sessions = sessions
        self._start = start
        self._end = end

    def __iter__(self) -> Iterator[ReadingSession]:
        return (s for s in self._sessions if self._start <= s.timestamp < self._end)


class SessionLog:
    def __init__(self, store: PersistenceGateway) -> None:
        self._store = store
        self._sessions: list[ReadingSession] = store.load_sessions()

    def __len__(self) -> int:
        return len(self._sessions)

    def append(self, session: ReadingSession) -> ReadingSession:
        if session.duration_seconds < 0:
            raise ValidationError(
                f"Session duration must be >= 0, got {session.duration_seconds}"
            )
        updated = [*self._sessions, session]
        self._store.save_sessions(updated)
        self._sessions = updated
        log.info(
            "Logged %.0fs session for book %s", session.duration_seconds, session.book_id
        )
        return session

    def sessions_in_range(self, start: datetime, end: datetime) -> Iterable[ReadingSession]:
        """Sessions with ``start <= timestamp < end``. Iterable more than once."""
        return SessionView(tuple(self._sessions), start, end)

    def for_book(self, book_id: str) -> tuple[ReadingSession, ...]:
        return tuple(s for s in self._sessions if s.book_id == book_id)

    def all(self) -> Iterable[ReadingSession]:
        return tuple(self._sessions)
