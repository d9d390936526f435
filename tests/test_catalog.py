"""Tests for the book catalog."""

from __future__ import annotations

from datetime import datetime

import pytest

from readingtime.errors import NotFoundError, PersistenceError, ValidationError
from readingtime.library.catalog import BookCatalog
from readingtime.library.store import Store
from readingtime.tracking.events import BookAdded, EventBus, ReadingProgressUpdated

from conftest import fail_writes, make_book


class TestAdd:
    def test_add_and_list(self, catalog: BookCatalog):
        book = catalog.add(make_book("Dune"))
        assert catalog.list() == [book]
        assert catalog.get(book.id) is book

    def test_insertion_order(self, catalog: BookCatalog):
        for title in ("Zebra", "Alpha", "Mango"):
            catalog.add(make_book(title))
        assert [b.title for b in catalog.list()] == ["Zebra", "Alpha", "Mango"]

    def test_trims_title_and_author(self, catalog: BookCatalog):
        book = catalog.add(make_book("  Dune \n", " Herbert "))
        assert book.title == "Dune"
        assert book.author == "Herbert"

    @pytest.mark.parametrize(
        "title,author,pages",
        [("", "A", 10), ("   ", "A", 10), ("T", "", 10), ("T", "A", 0), ("T", "A", -3)],
    )
    def test_rejects_invalid(self, catalog: BookCatalog, title, author, pages):
        with pytest.raises(ValidationError):
            catalog.add(make_book(title, author, total_pages=pages))
        assert catalog.list() == []

    def test_rejects_current_page_past_end(self, catalog: BookCatalog):
        with pytest.raises(ValidationError):
            catalog.add(make_book(total_pages=10, current_page=11))

    def test_persisted(self, catalog: BookCatalog, store: Store):
        catalog.add(make_book("Dune"))
        assert [b.title for b in BookCatalog(store).list()] == ["Dune"]

    def test_emits_book_added(self, catalog: BookCatalog, bus: EventBus):
        received = []
        bus.subscribe(BookAdded, received.append)
        book = catalog.add(make_book())
        assert received == [BookAdded(book.id)]


class TestUpdateProgress:
    @pytest.mark.parametrize("page", [0, 1, 150, 299, 300])
    def test_accepts_pages_in_range(self, catalog: BookCatalog, page: int):
        book = catalog.add(make_book(total_pages=300))
        catalog.update_progress(book.id, page)
        assert catalog.get(book.id).current_page == page

    @pytest.mark.parametrize("page", [-1, 301, 10_000])
    def test_rejects_pages_out_of_range(self, catalog: BookCatalog, page: int):
        book = catalog.add(make_book(total_pages=300, current_page=42))
        with pytest.raises(ValidationError):
            catalog.update_progress(book.id, page)
        assert catalog.get(book.id).current_page == 42

    def test_unknown_book(self, catalog: BookCatalog):
        with pytest.raises(NotFoundError) as exc:
            catalog.update_progress("missing", 1)
        assert exc.value.book_id == "missing"

    def test_persisted(self, catalog: BookCatalog, store: Store):
        book = catalog.add(make_book())
        catalog.update_progress(book.id, 77)
        assert store.load_books()[0].current_page == 77

    def test_emits_progress_updated(self, catalog: BookCatalog, bus: EventBus):
        book = catalog.add(make_book())
        received = []
        bus.subscribe(ReadingProgressUpdated, received.append)
        catalog.update_progress(book.id, 12)
        assert received == [ReadingProgressUpdated(book.id, 12)]


class TestRemove:
    def test_remove(self, catalog: BookCatalog, store: Store):
        keep = catalog.add(make_book("Keep"))
        drop = catalog.add(make_book("Drop"))
        catalog.remove(drop.id)
        assert catalog.list() == [keep]
        assert [b.title for b in store.load_books()] == ["Keep"]

    def test_remove_is_idempotent(self, catalog: BookCatalog):
        book = catalog.add(make_book())
        catalog.remove(book.id)
        catalog.remove(book.id)
        catalog.remove("never-existed")
        assert catalog.list() == []
        assert not catalog.contains(book.id)


class TestNotes:
    def test_add_note(self, catalog: BookCatalog, store: Store):
        book = catalog.add(make_book())
        note = catalog.add_note(book.id, "  Great opening  ")
        assert note.content == "Great opening"
        assert store.load_books()[0].notes[0].content == "Great opening"

    def test_empty_note_rejected(self, catalog: BookCatalog):
        book = catalog.add(make_book())
        with pytest.raises(ValidationError):
            catalog.add_note(book.id, "   ")

    def test_note_for_unknown_book(self, catalog: BookCatalog):
        with pytest.raises(NotFoundError):
            catalog.add_note("missing", "hello")


class TestSearch:
    def test_by_title_and_author(self, catalog: BookCatalog):
        catalog.add(make_book("Python Cookbook", "Beazley"))
        catalog.add(make_book("Rust Guide", "Klabnik"))
        assert [b.title for b in catalog.search("python")] == ["Python Cookbook"]
        assert [b.title for b in catalog.search("KLAB")] == ["Rust Guide"]

    def test_blank_query_lists_all(self, catalog: BookCatalog):
        catalog.add(make_book("A"))
        catalog.add(make_book("B"))
        assert len(catalog.search("  ")) == 2

    def test_no_results(self, catalog: BookCatalog):
        catalog.add(make_book())
        assert catalog.search("nonexistent") == []


class TestRejectedInput:
    def test_rejected_book_left_untouched(self, catalog: BookCatalog):
        book = make_book("  Dune  ", "   ")
        with pytest.raises(ValidationError):
            catalog.add(book)
        assert book.title == "  Dune  "
        assert book.author == "   "


class TestRecentlyAdded:
    def test_empty(self, catalog: BookCatalog):
        assert catalog.recently_added() is None

    def test_latest_date_added(self, catalog: BookCatalog):
        older = make_book("Older")
        older.date_added = datetime(2026, 3, 1, 9, 0)
        newer = make_book("Newer")
        newer.date_added = datetime(2026, 3, 5, 9, 0)
        catalog.add(newer)
        catalog.add(older)
        assert catalog.recently_added() is newer


class TestWriteFailures:
    def test_add(self, catalog: BookCatalog, store: Store, bus: EventBus, monkeypatch):
        added = []
        bus.subscribe(BookAdded, added.append)
        fail_writes(monkeypatch, store, "save_books")
        with pytest.raises(PersistenceError):
            catalog.add(make_book("Ghost"))
        assert catalog.list() == []
        assert added == []
        monkeypatch.undo()
        assert store.load_books() == []

    def test_update_progress(
        self, catalog: BookCatalog, store: Store, bus: EventBus, monkeypatch
    ):
        book = catalog.add(make_book(current_page=10))
        updates = []
        bus.subscribe(ReadingProgressUpdated, updates.append)
        fail_writes(monkeypatch, store, "save_books")
        with pytest.raises(PersistenceError):
            catalog.update_progress(book.id, 20)
        assert catalog.get(book.id).current_page == 10
        assert updates == []

    def test_add_note(self, catalog: BookCatalog, store: Store, monkeypatch):
        book = catalog.add(make_book())
        fail_writes(monkeypatch, store, "save_books")
        with pytest.raises(PersistenceError):
            catalog.add_note(book.id, "lost")
        assert catalog.get(book.id).notes == []

    def test_remove(self, catalog: BookCatalog, store: Store, monkeypatch):
        book = catalog.add(make_book())
        fail_writes(monkeypatch, store, "save_books")
        with pytest.raises(PersistenceError):
            catalog.remove(book.id)
        assert catalog.contains(book.id)

    def test_recovers_after_failure(
        self, catalog: BookCatalog, store: Store, monkeypatch
    ):
        fail_writes(monkeypatch, store, "save_books")
        with pytest.raises(PersistenceError):
            catalog.add(make_book("Ghost"))
        monkeypatch.undo()
        catalog.add(make_book("Real"))
        assert [b.title for b in store.load_books()] == ["Real"]
