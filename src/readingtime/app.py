"""Reading Time - terminal reading tracker."""

from __future__ import annotations

import logging
from typing import Optional

from textual.app import App

from readingtime.account import AccountService
from readingtime.config import AppConfig, load_config
from readingtime.library.catalog import BookCatalog
from readingtime.library.sessions import SessionLog
from readingtime.library.store import Store
from readingtime.stats.aggregator import StatsAggregator
from readingtime.tracking.events import EventBus
from readingtime.tracking.goal import GoalTracker
from readingtime.tracking.ticker import Ticker
from readingtime.ui.screens.home_screen import HomeScreen
from readingtime.ui.themes import APP_CSS

log = logging.getLogger(__name__)


class ReadingTimeApp(App):
    """Time reading sessions against a daily goal."""

    TITLE = "Reading Time"
    CSS = APP_CSS

    def __init__(self, config: AppConfig | None = None) -> None:
        super().__init__()
        self.config = config or load_config()
        self.store = Store(self.config.store_path)
        self.bus = EventBus()
        self.catalog = BookCatalog(self.store, self.bus)
        self.sessions = SessionLog(self.store)
        self.tracker = GoalTracker(
            self.store,
            self.catalog,
            self.sessions,
            bus=self.bus,
            default_goal_minutes=self.config.default_goal_minutes,
        )
        self.stats = StatsAggregator(self.sessions)
        self.account = AccountService(self.store)
        self.selected_book_id: Optional[str] = None
        self._rollover = Ticker(
            self.config.rollover_check_seconds, lambda _: self.tracker.check_rollover()
        )
        if self.store.decode_failures:
            log.warning("Stored data was unreadable for: %s", self.store.decode_failures)

    def on_mount(self) -> None:
        books = self.catalog.list()
        if books:
            self.selected_book_id = books[0].id
        self._rollover.start()
        self.push_screen(HomeScreen())
        if self.store.decode_failures:
            self.notify(
                "Some saved data could not be read and was reset: "
                + ", ".join(self.store.decode_failures),
                severity="warning",
            )

    async def action_quit(self) -> None:
        await self._rollover.aclose()
        if self.tracker.is_active:
            self.tracker.pause()
        self.store.close()
        self.exit()


def _setup_logging(config: AppConfig) -> None:
    handler = logging.FileHandler(config.log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger("readingtime")
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)


def main() -> None:
    config = load_config()
    _setup_logging(config)
    app = ReadingTimeApp(config=config)
    app.run()


if __name__ == "__main__":
    main()
