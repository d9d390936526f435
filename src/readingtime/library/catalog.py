"""Book catalog: insertion-ordered books with page progress and notes."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from readingtime.errors import NotFoundError, ValidationError
from readingtime.tracking.events import BookAdded, EventBus, ReadingProgressUpdated

from .models import Book, Note
from .store import PersistenceGateway

log = logging.getLogger(__name__)


class BookCatalog:
    """Owns the book collection.

    Every mutation rewrites the whole collection and only takes effect in
    memory once that write has succeeded.
    """

    def __init__(self, store: PersistenceGateway, bus: Optional[EventBus] = None) -> None:
        self._store = store
        self._bus = bus or EventBus()
        self._books: list[Book] = store.load_books()

    def __len__(self) -> int:
        return len(self._books)

    def _find(self, book_id: str) -> Book:
        for book in self._books:
            if book.id == book_id:
                return book
        raise NotFoundError(book_id)

    def _replaced(self, updated: Book) -> list[Book]:
        return [updated if b.id == updated.id else b for b in self._books]

    def add(self, book: Book) -> Book:
        title = book.title.strip()
        author = book.author.strip()
        if not title:
            raise ValidationError("Title must not be empty")
        if not author:
            raise ValidationError("Author must not be empty")
        if book.total_pages <= 0:
            raise ValidationError(
                f"Total pages must be positive, got {book.total_pages}"
            )
        if not 0 <= book.current_page <= book.total_pages:
            raise ValidationError(
                f"Current page {book.current_page} outside 0..{book.total_pages}"
            )
        self._store.save_books(
            [*self._books, replace(book, title=title, author=author)]
        )
        book.title = title
        book.author = author
        self._books = [*self._books, book]
        log.info("Added book %s (%s)", book.id, book.title)
        self._bus.publish(BookAdded(book.id))
        return book

    def get(self, book_id: str) -> Book:
        return self._find(book_id)

    def contains(self, book_id: str) -> bool:
        return any(b.id == book_id for b in self._books)

    def recently_added(self) -> Optional[Book]:
        """The book with the latest ``date_added``, if any."""
        if not self._books:
            return None
        return max(self._books, key=lambda b: b.date_added)

    def check_page(self, book_id: str, new_page: int) -> Book:
        book = self._find(book_id)
        if new_page < 0 or new_page > book.total_pages:
            raise ValidationError(
                f"Page {new_page} outside 0..{book.total_pages} for {book.title!r}"
            )
        return book

    def update_progress(self, book_id: str, new_page: int) -> Book:
        book = self.check_page(book_id, new_page)
        self._store.save_books(self._replaced(replace(book, current_page=new_page)))
        book.current_page = new_page
        self._bus.publish(ReadingProgressUpdated(book.id, new_page))
        return book

    def add_note(self, book_id: str, content: str) -> Note:
        book = self._find(book_id)
        content = content.strip()
        if not content:
            raise ValidationError("Note must not be empty")
        note = Note(content=content)
        self._store.save_books(self._replaced(replace(book, notes=[*book.notes, note])))
        book.notes.append(note)
        return note

    def remove(self, book_id: str) -> None:
        remaining = [b for b in self._books if b.id != book_id]
        if len(remaining) == len(self._books):
            return
        self._store.save_books(remaining)
        self._books = remaining
        log.info("Removed book %s", book_id)

    def list(self) -> list[Book]:
        return list(self._books)

    def search(self, query: str) -> list[Book]:
        q = query.strip().lower()
        if not q:
            return self.list()
        return [
            b for b in self._books if q in b.title.lower() or q in b.author.lower()
        ]
