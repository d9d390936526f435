"""Tests for the event bus."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from readingtime.tracking.events import BookAdded, DailyProgressReset, EventBus


class TestEventBus:
    def test_delivers_by_type(self, bus: EventBus):
        added, reset = [], []
        bus.subscribe(BookAdded, added.append)
        bus.subscribe(DailyProgressReset, reset.append)
        bus.publish(BookAdded("b1"))
        assert added == [BookAdded("b1")]
        assert reset == []

    def test_no_subscribers(self, bus: EventBus):
        bus.publish(DailyProgressReset(date(2026, 1, 1)))

    def test_unsubscribe(self, bus: EventBus):
        received = []
        unsubscribe = bus.subscribe(BookAdded, received.append)
        unsubscribe()
        unsubscribe()
        bus.publish(BookAdded("b1"))
        assert received == []

    def test_failing_handler_does_not_block_others(
        self, bus: EventBus, caplog: pytest.LogCaptureFixture
    ):
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(BookAdded, broken)
        bus.subscribe(BookAdded, received.append)
        with caplog.at_level(logging.ERROR, logger="readingtime.tracking.events"):
            bus.publish(BookAdded("b1"))
        assert received == [BookAdded("b1")]
        assert "boom" in caplog.text
