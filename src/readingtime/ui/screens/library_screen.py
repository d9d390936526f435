from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Static

from readingtime.errors import PersistenceError, ValidationError
from readingtime.formatting import page_label
from readingtime.library.models import Book

if TYPE_CHECKING:
    from readingtime.app import ReadingTimeApp


class AddBookScreen(ModalScreen[Optional[Book]]):
    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = """
    AddBookScreen {
        align: center middle;
    }
    #add-book-dialog {
        width: 70;
        height: 20;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }
    #add-book-error {
        color: $error;
        height: 1;
    }
    #add-book-buttons {
        align: center middle;
        height: 3;
    }
    #add-book-buttons Button {
        margin: 0 2;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="add-book-dialog"):
            yield Label("Add Book")
            yield Input(placeholder="Title", id="ab-title")
            yield Input(placeholder="Author", id="ab-author")
            yield Input(placeholder="Total pages", id="ab-pages")
            yield Label("", id="add-book-error")
            with Horizontal(id="add-book-buttons"):
                yield Button("Save", variant="primary", id="ab-save")
                yield Button("Cancel", variant="default", id="ab-cancel")

    def on_mount(self) -> None:
        self.query_one("#ab-title", Input).focus()

    def _save(self) -> None:
        title = self.query_one("#ab-title", Input).value
        author = self.query_one("#ab-author", Input).value
        pages = self.query_one("#ab-pages", Input).value.strip()
        try:
            total_pages = int(pages)
        except ValueError:
            self._show_error("Please enter a valid number of pages")
            return
        book = Book(title=title, author=author, total_pages=total_pages)
        try:
            self.app.catalog.add(book)  # type: ignore[attr-defined]
        except (ValidationError, PersistenceError) as e:
            self._show_error(str(e))
            return
        self.dismiss(book)

    def _show_error(self, message: str) -> None:
        self.query_one("#add-book-error", Label).update(message)

    @on(Input.Submitted)
    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ab-save":
            self._save()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class RemoveBookScreen(ModalScreen[bool]):
    """Shows what removing a book throws away before asking to confirm."""

    BINDINGS = [
        Binding("escape", "keep", "Keep"),
        Binding("r", "remove", "Remove"),
    ]

    DEFAULT_CSS = """
    RemoveBookScreen {
        align: center middle;
    }
    #remove-dialog {
        width: 64;
        height: 14;
        background: $surface;
        border: heavy $error;
        padding: 1 2;
    }
    #remove-summary {
        color: $text-muted;
        margin: 1 0;
    }
    #remove-buttons {
        align: right middle;
        height: 3;
    }
    """

    def __init__(self, book: Book, session_count: int, minutes_read: float) -> None:
        super().__init__()
        self._book = book
        self._session_count = session_count
        self._minutes_read = minutes_read

    def compose(self) -> ComposeResult:
        book = self._book
        with Vertical(id="remove-dialog"):
            yield Label(f"Remove '{book.title}' by {book.author}?")
            yield Static(
                f"{page_label(book)} ({book.progress:.0%})\n"
                f"{len(book.notes)} notes, "
                f"{self._session_count} sessions ({int(self._minutes_read)} min)\n"
                "Logged sessions stay in your weekly stats.",
                id="remove-summary",
            )
            with Horizontal(id="remove-buttons"):
                yield Button("Keep", variant="primary", id="remove-keep")
                yield Button("Remove", variant="error", id="remove-confirm")

    def on_mount(self) -> None:
        self.query_one("#remove-keep", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "remove-confirm")

    def action_remove(self) -> None:
        self.dismiss(True)

    def action_keep(self) -> None:
        self.dismiss(False)


class LibraryScreen(Screen):
    """Book list. Enter selects the book for the reading timer."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
        Binding("A", "add_book", "Add", priority=True),
        Binding("D", "remove_book", "Remove", priority=True),
        Binding("slash", "focus_filter", "Filter"),
    ]

    @property
    def rt(self) -> ReadingTimeApp:
        return self.app  # type: ignore[return-value]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="library-header")
        yield Input(placeholder="Filter by title or author", id="filter-input")
        yield DataTable(id="book-table")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#book-table", DataTable)
        table.cursor_type = "row"
        table.add_columns("Title", "Author", "Progress", "Pages", "Added")
        self._refresh_books()
        table.focus()

    @property
    def _filter(self) -> str:
        return self.query_one("#filter-input", Input).value

    def _refresh_books(self) -> None:
        table = self.query_one("#book-table", DataTable)
        table.clear()

        newest = self.rt.catalog.recently_added()
        books = self.rt.catalog.search(self._filter)
        for book in books:
            title = book.title
            if book.id == self.rt.selected_book_id:
                title = "▶ " + title
            if newest is not None and book.id == newest.id:
                title = "✚ " + title
            table.add_row(
                title,
                book.author,
                f"{book.progress:.0%}",
                f"{book.current_page}/{book.total_pages}",
                book.date_added.strftime("%Y-%m-%d"),
                key=book.id,
            )

        shown = f"{len(books)} of {len(self.rt.catalog)}" if self._filter else len(books)
        self.query_one("#library-header", Static).update(
            f" My Library  ({shown} books)"
        )

    # ── Filter ──────────────────────────────────

    def action_focus_filter(self) -> None:
        self.query_one("#filter-input", Input).focus()

    @on(Input.Changed, "#filter-input")
    def on_filter_changed(self, event: Input.Changed) -> None:
        self._refresh_books()

    @on(Input.Submitted, "#filter-input")
    def on_filter_submitted(self, event: Input.Submitted) -> None:
        self.query_one("#book-table", DataTable).focus()

    # ── Add / Remove ────────────────────────────

    def action_add_book(self) -> None:
        self.app.push_screen(AddBookScreen(), callback=self._on_book_added)

    def _on_book_added(self, book: Optional[Book]) -> None:
        if book is None:
            return
        if not self.rt.selected_book_id:
            self.rt.selected_book_id = book.id
        self._refresh_books()
        self.notify(f"Added: {book.title}")

    def _cursor_book_id(self) -> Optional[str]:
        table = self.query_one("#book-table", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return str(row_key.value)

    def action_remove_book(self) -> None:
        book_id = self._cursor_book_id()
        if not book_id:
            return
        if self.rt.tracker.is_active and self.rt.tracker.book_id == book_id:
            self.notify("Stop the current session first", severity="warning")
            return
        book = self.rt.catalog.get(book_id)
        logged = self.rt.sessions.for_book(book_id)
        self.app.push_screen(
            RemoveBookScreen(book, len(logged), sum(s.minutes for s in logged)),
            callback=lambda confirmed: self._on_remove_confirmed(confirmed, book),
        )

    def _on_remove_confirmed(self, confirmed: bool | None, book: Book) -> None:
        if not confirmed:
            return
        try:
            self.rt.catalog.remove(book.id)
        except PersistenceError as e:
            self.notify(str(e), severity="error")
            return
        if self.rt.selected_book_id == book.id:
            self.rt.selected_book_id = None
        self._refresh_books()
        self.notify(f"Removed: {book.title}")

    # ── Select / Back ───────────────────────────

    @on(DataTable.RowSelected, "#book-table")
    def on_row_selected(self, event: DataTable.RowSelected) -> None:
        if self.rt.tracker.is_active:
            self.notify("Stop the current session before switching books")
            return
        self.rt.selected_book_id = str(event.row_key.value)
        self.app.pop_screen()

    def action_go_back(self) -> None:
        filter_input = self.query_one("#filter-input", Input)
        if filter_input.value:
            filter_input.value = ""
            self.query_one("#book-table", DataTable).focus()
            return
        self.app.pop_screen()
