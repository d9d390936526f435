from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, Footer, Header, Input, Label, Static

from readingtime.errors import NotFoundError, ReadingTimeError
from readingtime.formatting import format_duration, goal_label, page_label, progress_bar
from readingtime.tracking.events import (
    BookAdded,
    DailyProgressReset,
    GoalChanged,
    ReadingProgressUpdated,
)
from readingtime.tracking.ticker import Ticker

if TYPE_CHECKING:
    from readingtime.app import ReadingTimeApp


class PageInputScreen(ModalScreen[Optional[int]]):
    """Asks for the page reached. Dismisses with None on cancel."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = """
    PageInputScreen {
        align: center middle;
    }
    #page-dialog {
        width: 60;
        height: 13;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }
    #page-error {
        color: $error;
        height: 1;
    }
    #page-buttons {
        align: center middle;
        height: 3;
    }
    #page-buttons Button {
        margin: 0 2;
    }
    """

    def __init__(self, book_title: str, current_page: int) -> None:
        super().__init__()
        self._book_title = book_title
        self._current_page = current_page

    def compose(self) -> ComposeResult:
        with Vertical(id="page-dialog"):
            yield Label(f"Enter the page number you reached in '{self._book_title}'")
            yield Input(value=str(self._current_page), id="page-input")
            yield Label("", id="page-error")
            with Horizontal(id="page-buttons"):
                yield Button("Save", variant="primary", id="page-save")
                yield Button("Cancel", variant="default", id="page-cancel")

    def on_mount(self) -> None:
        self.query_one("#page-input", Input).focus()

    def _submit(self) -> None:
        raw = self.query_one("#page-input", Input).value.strip()
        try:
            self.dismiss(int(raw))
        except ValueError:
            self.query_one("#page-error", Label).update("Please enter a whole number")

    @on(Input.Submitted, "#page-input")
    def on_page_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "page-save":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class HomeScreen(Screen):
    BINDINGS = [
        Binding("space", "toggle_timer", "Start/Pause"),
        Binding("s", "stop", "Stop & Save"),
        Binding("c", "cancel_session", "Cancel"),
        Binding("b", "library", "Books"),
        Binding("t", "stats", "Stats"),
        Binding("g", "cycle_goal", "Goal"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._unsubscribe: list[Callable[[], None]] = []
        self._ticker: Optional[Ticker] = None

    @property
    def rt(self) -> ReadingTimeApp:
        return self.app  # type: ignore[return-value]

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(classes="card"):
            yield Static("", id="goal-title", classes="card-title")
            yield Static("", id="goal-bar")
        with Vertical(classes="card"):
            yield Static("Current Book", classes="card-title")
            yield Static("", id="book-info")
        with Vertical(classes="card"):
            yield Static("", id="timer")
            yield Static("", id="session-info")
        yield Footer()

    def on_mount(self) -> None:
        bus = self.rt.bus
        refresh = lambda _event: self._refresh()  # noqa: E731
        self._unsubscribe = [
            bus.subscribe(BookAdded, refresh),
            bus.subscribe(ReadingProgressUpdated, refresh),
            bus.subscribe(DailyProgressReset, refresh),
            bus.subscribe(GoalChanged, refresh),
        ]
        self._ticker = Ticker(self.rt.config.tick_seconds, self._on_tick)
        self._refresh()

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        if self._ticker:
            self._ticker.stop()

    def on_screen_resume(self) -> None:
        self._refresh()

    def _on_tick(self, seconds: float) -> None:
        self.rt.tracker.tick(seconds)
        self._refresh()

    def _refresh(self) -> None:
        tracker = self.rt.tracker
        state = tracker.state
        self.query_one("#goal-title", Static).update(
            "Daily Goal   "
            + goal_label(state.accumulated_seconds_today, state.daily_goal_minutes)
        )
        self.query_one("#goal-bar", Static).update(
            f"{progress_bar(state.progress, 40)} {state.progress:.0%}"
        )

        book_info = "No book selected. Press [b] to choose one."
        book_id = tracker.book_id or self.rt.selected_book_id
        if book_id:
            try:
                book = self.rt.catalog.get(book_id)
                book_info = f"{book.title}\n{book.author}\n{page_label(book)}"
            except NotFoundError:
                self.rt.selected_book_id = None
        self.query_one("#book-info", Static).update(book_info)

        self.query_one("#timer", Static).update(
            format_duration(state.accumulated_seconds_today)
        )
        status = "Reading" if tracker.is_active else "Paused"
        self.query_one("#session-info", Static).update(
            f"{status}  ·  this session {format_duration(tracker.reading_time)}"
        )

    # ── Timer ───────────────────────────────────

    def action_toggle_timer(self) -> None:
        tracker = self.rt.tracker
        try:
            if tracker.is_active:
                tracker.pause()
                self._ticker.stop()
            else:
                if not self.rt.selected_book_id:
                    self.notify("Select a book first", severity="warning")
                    return
                tracker.start(self.rt.selected_book_id)
                self._ticker.start()
        except ReadingTimeError as e:
            self.notify(str(e), severity="error")
        self._refresh()

    def action_stop(self) -> None:
        tracker = self.rt.tracker
        if not tracker.is_active or not tracker.book_id:
            return
        book = self.rt.catalog.get(tracker.book_id)
        self.app.push_screen(
            PageInputScreen(book.title, book.current_page), callback=self._on_page_entered
        )

    def _on_page_entered(self, page: Optional[int]) -> None:
        if page is None:
            self.action_cancel_session()
            return
        try:
            session = self.rt.tracker.stop_and_save(page)
        except ReadingTimeError as e:
            self.notify(str(e), severity="error")
            if not self.rt.tracker.is_active:
                self._ticker.stop()
                self._refresh()
            return
        self._ticker.stop()
        self.notify(f"Saved {format_duration(session.duration_seconds)} of reading")
        self._refresh()

    def action_cancel_session(self) -> None:
        self.rt.tracker.cancel()
        self._ticker.stop()
        self._refresh()

    # ── Navigation / Goal ───────────────────────

    def action_library(self) -> None:
        from readingtime.ui.screens.library_screen import LibraryScreen

        self.app.push_screen(LibraryScreen())

    def action_stats(self) -> None:
        from readingtime.ui.screens.stats_screen import StatsScreen

        self.app.push_screen(StatsScreen())

    def action_cycle_goal(self) -> None:
        presets = self.rt.config.goal_presets
        current = self.rt.tracker.state.daily_goal_minutes
        later = [p for p in presets if p > current + 0.01]
        new_goal = later[0] if later else presets[0]
        self.rt.tracker.set_goal(new_goal)
        self.notify(f"Daily goal: {int(new_goal)} min")

    async def action_quit_app(self) -> None:
        await self.rt.action_quit()
