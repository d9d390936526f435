"""Typed publish/subscribe bus for presentation refreshes."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Callable, TypeVar, Union

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookAdded:
    book_id: str


@dataclass(frozen=True)
class ReadingProgressUpdated:
    book_id: str
    current_page: int


@dataclass(frozen=True)
class DailyProgressReset:
    date: date


@dataclass(frozen=True)
class GoalChanged:
    daily_goal_minutes: float


Event = Union[BookAdded, ReadingProgressUpdated, DailyProgressReset, GoalChanged]
E = TypeVar("E", BookAdded, ReadingProgressUpdated, DailyProgressReset, GoalChanged)
Handler = Callable[[E], None]


class EventBus:
    """Fire-and-observe delivery. Handlers run synchronously in publish order."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Handler) -> Callable[[], None]:
        """Register ``handler``; returns a callable that unsubscribes it."""
        self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, event: Event) -> None:
        for handler in list(self._handlers.get(type(event), [])):
            try:
                handler(event)
            except Exception:
                log.exception("Handler %r failed for %r", handler, event)
