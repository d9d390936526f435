"""Daily goal state machine: session timer, today's total and day rollover.

``DailyGoalState`` values are never mutated. The module-level functions
return updated copies; ``GoalTracker`` holds the current value and writes
it to the store at transition boundaries (pause, save, cancel, rollover,
goal change), not on every tick.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional

from readingtime.errors import SessionStateError, ValidationError
from readingtime.library.catalog import BookCatalog
from readingtime.library.models import (
    DEFAULT_GOAL_MINUTES,
    DailyGoalState,
    ReadingSession,
)
from readingtime.library.sessions import SessionLog
from readingtime.library.store import PersistenceGateway

from .events import DailyProgressReset, EventBus, GoalChanged

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def roll_over(state: DailyGoalState, today: date) -> tuple[DailyGoalState, bool]:
    """Zero today's total if ``today`` differs from the last reset date."""
    if state.last_reset_date == today:
        return state, False
    return replace(state, accumulated_seconds_today=0.0, last_reset_date=today), True


def accumulate(state: DailyGoalState, seconds: float) -> DailyGoalState:
    return replace(
        state, accumulated_seconds_today=state.accumulated_seconds_today + seconds
    )


def with_goal(state: DailyGoalState, minutes: float) -> DailyGoalState:
    if minutes <= 0:
        raise ValidationError(f"Daily goal must be positive, got {minutes}")
    return replace(state, daily_goal_minutes=float(minutes))


class TimerState(enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"


class GoalTracker:
    def __init__(
        self,
        store: PersistenceGateway,
        catalog: BookCatalog,
        sessions: SessionLog,
        bus: Optional[EventBus] = None,
        clock: Clock = datetime.now,
        default_goal_minutes: float = DEFAULT_GOAL_MINUTES,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._sessions = sessions
        self._bus = bus or EventBus()
        self._clock = clock
        self._state = store.load_goal_state(
            clock().date(), default_goal_minutes=default_goal_minutes
        )
        self._timer = TimerState.IDLE
        self._book_id: Optional[str] = None
        self._elapsed = 0.0
        # Portion of the current session already added to today's total.
        self._counted_today = 0.0

    # ── Observers ──────────────────────────────────────────

    @property
    def state(self) -> DailyGoalState:
        self.check_rollover()
        return self._state

    @property
    def timer_state(self) -> TimerState:
        self.check_rollover()
        return self._timer

    @property
    def is_active(self) -> bool:
        return self.timer_state is TimerState.ACTIVE

    @property
    def book_id(self) -> Optional[str]:
        return self._book_id

    @property
    def reading_time(self) -> float:
        """Seconds elapsed in the current session."""
        self.check_rollover()
        return self._elapsed

    @property
    def progress(self) -> float:
        return self.state.progress

    def check_rollover(self) -> bool:
        """Reset today's total on a calendar-day change. Safe to call often."""
        today = self._clock().date()
        new_state, rolled = roll_over(self._state, today)
        if not rolled:
            return False
        self._state = new_state
        self._counted_today = 0.0
        self._store.save_goal_state(new_state)
        log.info("Daily progress reset for %s", today.isoformat())
        self._bus.publish(DailyProgressReset(today))
        return True

    # ── Transitions ────────────────────────────────────────

    def start(self, book_id: str) -> None:
        self.check_rollover()
        if self._timer is TimerState.ACTIVE:
            raise SessionStateError("A reading session is already running")
        self._catalog.get(book_id)
        self._timer = TimerState.ACTIVE
        self._book_id = book_id
        self._elapsed = 0.0
        self._counted_today = 0.0

    def tick(self, delta_seconds: float = 1.0) -> None:
        if delta_seconds < 0:
            raise ValidationError(f"Tick must be >= 0, got {delta_seconds}")
        self.check_rollover()
        if self._timer is not TimerState.ACTIVE:
            return
        self._elapsed += delta_seconds
        self._counted_today += delta_seconds
        self._state = accumulate(self._state, delta_seconds)

    def pause(self) -> None:
        self.check_rollover()
        if self._timer is not TimerState.ACTIVE:
            raise SessionStateError("No reading session is running")
        self._timer = TimerState.IDLE
        self._store.save_goal_state(self._state)

    def stop_and_save(self, new_page: int) -> ReadingSession:
        self.check_rollover()
        if self._timer is not TimerState.ACTIVE or self._book_id is None:
            raise SessionStateError("No reading session is running")
        book_id = self._book_id
        # Bad pages and a failed session write leave the session running.
        self._catalog.check_page(book_id, new_page)
        session = self._sessions.append(
            ReadingSession(
                book_id=book_id,
                duration_seconds=self._elapsed,
                timestamp=self._clock(),
            )
        )
        # The session is logged from here on, so the timer ends even if a
        # later write fails; retrying would log it twice.
        self._reset_session()
        self._catalog.update_progress(book_id, new_page)
        self._store.save_goal_state(self._state)
        return session

    def cancel(self) -> None:
        self.check_rollover()
        if self._counted_today:
            self._state = replace(
                self._state,
                accumulated_seconds_today=max(
                    self._state.accumulated_seconds_today - self._counted_today, 0.0
                ),
            )
            self._store.save_goal_state(self._state)
        log.info("Discarded %.0fs reading session", self._elapsed)
        self._reset_session()

    def set_goal(self, minutes: float) -> DailyGoalState:
        self.check_rollover()
        self._state = with_goal(self._state, minutes)
        self._store.save_goal_state(self._state)
        self._bus.publish(GoalChanged(self._state.daily_goal_minutes))
        return self._state

    def _reset_session(self) -> None:
        self._timer = TimerState.IDLE
        self._book_id = None
        self._elapsed = 0.0
        self._counted_today = 0.0
