"""Data models for books, reading sessions, goal state and statistics."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

DEFAULT_GOAL_MINUTES = 30.0


def new_id() -> str:
    return str(uuid.uuid4()).upper()


def parse_timestamp(value: str) -> datetime:
    """ISO-8601 to naive local time. Values with an offset are converted."""
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts


@dataclass
class Note:
    content: str
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Note:
        return cls(
            id=str(data["id"]),
            content=str(data["content"]),
            timestamp=parse_timestamp(data["timestamp"]),
        )


@dataclass
class Book:
    title: str
    author: str
    total_pages: int
    id: str = field(default_factory=new_id)
    current_page: int = 0
    cover_image_ref: Optional[str] = None  # opaque blob reference
    notes: list[Note] = field(default_factory=list)
    date_added: datetime = field(default_factory=datetime.now)

    @property
    def progress(self) -> float:
        """Fraction of the book read, 0.0 - 1.0."""
        if self.total_pages <= 0:
            return 0.0
        return min(max(self.current_page / self.total_pages, 0.0), 1.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "coverImageRef": self.cover_image_ref,
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "notes": [n.to_dict() for n in self.notes],
            "dateAdded": self.date_added.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Book:
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            author=str(data["author"]),
            cover_image_ref=data.get("coverImageRef"),
            current_page=int(data["currentPage"]),
            total_pages=int(data["totalPages"]),
            notes=[Note.from_dict(n) for n in data.get("notes", [])],
            date_added=parse_timestamp(data["dateAdded"]),
        )


@dataclass(frozen=True)
class ReadingSession:
    """One timed reading session. Immutable once logged."""

    book_id: str
    duration_seconds: float
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def minutes(self) -> float:
        return self.duration_seconds / 60.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "bookId": self.book_id,
            "durationSeconds": self.duration_seconds,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReadingSession:
        return cls(
            book_id=str(data["bookId"]),
            duration_seconds=float(data["durationSeconds"]),
            timestamp=parse_timestamp(data["timestamp"]),
        )


@dataclass(frozen=True)
class DailyGoalState:
    """Today's accumulated reading time against the daily goal."""

    last_reset_date: date
    daily_goal_minutes: float = DEFAULT_GOAL_MINUTES
    accumulated_seconds_today: float = 0.0

    @property
    def progress(self) -> float:
        goal_seconds = self.daily_goal_minutes * 60
        if goal_seconds <= 0:
            return 0.0
        return min(self.accumulated_seconds_today / goal_seconds, 1.0)

    @property
    def minutes_today(self) -> float:
        return self.accumulated_seconds_today / 60.0


@dataclass(frozen=True)
class DailyReadingStat:
    date: date
    minutes_read: float
    progress: float  # 0.0 - 1.0 of the daily goal


@dataclass(frozen=True)
class WeeklyReadingStats:
    """Seven consecutive days, oldest first."""

    start_date: date
    daily_stats: tuple[DailyReadingStat, ...] = ()

    @property
    def total_minutes(self) -> float:
        return sum(s.minutes_read for s in self.daily_stats)

    @property
    def average_progress(self) -> float:
        if not self.daily_stats:
            return 0.0
        return sum(s.progress for s in self.daily_stats) / len(self.daily_stats)


@dataclass(frozen=True)
class Identity:
    """Credential triple handed over by the external sign-in provider."""

    user_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
