from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Callable

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static

from readingtime.formatting import progress_bar
from readingtime.stats.aggregator import (
    average_minutes_per_day,
    best_day,
    goal_achievement_rate,
)
from readingtime.tracking.events import DailyProgressReset, GoalChanged

if TYPE_CHECKING:
    from readingtime.app import ReadingTimeApp


class StatsScreen(Screen):
    BINDINGS = [
        Binding("escape", "go_back", "Back"),
        Binding("r", "refresh_stats", "Refresh"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._unsubscribe: list[Callable[[], None]] = []

    @property
    def rt(self) -> ReadingTimeApp:
        return self.app  # type: ignore[return-value]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="stats-header")
        yield DataTable(id="week-table")
        yield Static("", id="stats-summary")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#week-table", DataTable)
        table.cursor_type = "none"
        table.add_columns("Day", "Minutes", "Progress", "Goal")
        refresh = lambda _event: self.action_refresh_stats()  # noqa: E731
        self._unsubscribe = [
            self.rt.bus.subscribe(DailyProgressReset, refresh),
            self.rt.bus.subscribe(GoalChanged, refresh),
        ]
        self.action_refresh_stats()

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()

    def action_refresh_stats(self) -> None:
        goal = self.rt.tracker.state.daily_goal_minutes
        weekly = self.rt.stats.weekly_stats(date.today(), goal)

        table = self.query_one("#week-table", DataTable)
        table.clear()
        for stat in reversed(weekly.daily_stats):
            table.add_row(
                stat.date.strftime("%a %d %b"),
                f"{int(stat.minutes_read)} minutes",
                progress_bar(stat.progress),
                "✓" if stat.minutes_read >= goal else "",
            )

        identity = self.rt.account.current()
        who = f"  ·  {identity.display_name or identity.user_id}" if identity else ""
        self.query_one("#stats-header", Static).update(f" Weekly Progress{who}")

        best = best_day(weekly)
        self.query_one("#stats-summary", Static).update(
            f"Total Reading Time   {int(weekly.total_minutes)} minutes\n"
            f"Daily Average        {int(average_minutes_per_day(weekly))} min/day\n"
            f"Goal Achievement     {goal_achievement_rate(weekly, goal)}%\n"
            f"Best Day             {int(best.minutes_read)} min "
            f"({best.date.strftime('%a')})"
        )

    def action_go_back(self) -> None:
        self.app.pop_screen()
