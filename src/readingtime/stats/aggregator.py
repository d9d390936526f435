"""Daily and seven-day reading statistics derived from the session log.

Nothing here keeps state between calls: every figure is a function of the
session snapshot, the reference date and the goal.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Protocol

from readingtime.errors import EmptyDataError
from readingtime.library.models import (
    DailyReadingStat,
    ReadingSession,
    WeeklyReadingStats,
)

WEEK_DAYS = 7


class SessionSource(Protocol):
    def sessions_in_range(
        self, start: datetime, end: datetime
    ) -> Iterable[ReadingSession]: ...


def day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def progress_for(minutes_read: float, goal_minutes: float) -> float:
    if goal_minutes <= 0:
        return 0.0
    return min(minutes_read / goal_minutes, 1.0)


def total_minutes(weekly: WeeklyReadingStats) -> float:
    return weekly.total_minutes


def average_minutes_per_day(weekly: WeeklyReadingStats) -> float:
    """Always divides by seven, days without reading included."""
    return weekly.total_minutes / WEEK_DAYS


def goal_achievement_rate(weekly: WeeklyReadingStats, goal_minutes: float) -> int:
    """Percentage of the seven days on which the goal was met."""
    if goal_minutes <= 0:
        return 0
    achieved = sum(1 for s in weekly.daily_stats if s.minutes_read >= goal_minutes)
    return round(achieved / WEEK_DAYS * 100)


def best_day(weekly: WeeklyReadingStats) -> DailyReadingStat:
    """Day with the most minutes; the earliest one wins a tie."""
    if not weekly.daily_stats:
        raise EmptyDataError("No days to pick a best day from")
    return max(weekly.daily_stats, key=lambda s: s.minutes_read)


class StatsAggregator:
    def __init__(self, sessions: SessionSource) -> None:
        self._sessions = sessions

    def daily_stat(self, day: date, goal_minutes: float) -> DailyReadingStat:
        start, end = day_bounds(day)
        seconds = sum(
            s.duration_seconds for s in self._sessions.sessions_in_range(start, end)
        )
        minutes = seconds / 60.0
        return DailyReadingStat(
            date=day, minutes_read=minutes, progress=progress_for(minutes, goal_minutes)
        )

    def weekly_stats(
        self, reference_date: date, goal_minutes: float
    ) -> WeeklyReadingStats:
        """Seven days ending at ``reference_date`` inclusive, oldest first."""
        week_start = reference_date - timedelta(days=WEEK_DAYS - 1)
        window_start, _ = day_bounds(week_start)
        _, window_end = day_bounds(reference_date)

        seconds_by_day: dict[date, float] = defaultdict(float)
        for s in self._sessions.sessions_in_range(window_start, window_end):
            seconds_by_day[s.timestamp.date()] += s.duration_seconds

        stats = []
        for offset in range(WEEK_DAYS):
            day = week_start + timedelta(days=offset)
            minutes = seconds_by_day.get(day, 0.0) / 60.0
            stats.append(
                DailyReadingStat(
                    date=day,
                    minutes_read=minutes,
                    progress=progress_for(minutes, goal_minutes),
                )
            )
        return WeeklyReadingStats(start_date=week_start, daily_stats=tuple(stats))

    def minutes_by_book(
        self, start: datetime, end: datetime, known_ids: Iterable[str]
    ) -> dict[Optional[str], float]:
        """Minutes per book in ``[start, end)``.

        Sessions pointing at books no longer in ``known_ids`` are summed
        under ``None``.
        """
        known = set(known_ids)
        totals: dict[Optional[str], float] = defaultdict(float)
        for s in self._sessions.sessions_in_range(start, end):
            key = s.book_id if s.book_id in known else None
            totals[key] += s.minutes
        return dict(totals)
