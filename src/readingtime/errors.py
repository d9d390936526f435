"""Error types raised by the reading-time core."""

from __future__ import annotations


class ReadingTimeError(Exception):
    """Base class for all reading-time errors."""


class ValidationError(ReadingTimeError):
    """Malformed input: empty title, bad page number, non-positive goal..."""


class NotFoundError(ReadingTimeError):
    """An operation referenced a book id that is not in the catalog."""

    def __init__(self, book_id: str) -> None:
        super().__init__(f"No book with id {book_id!r}")
        self.book_id = book_id


class PersistenceError(ReadingTimeError):
    """The backing store failed to read or write a key."""

    def __init__(self, key: str, cause: Exception) -> None:
        super().__init__(f"Storage failure for {key!r}: {cause}")
        self.key = key
        self.cause = cause


class EmptyDataError(ReadingTimeError):
    """An aggregate was requested over an empty sequence."""


class SessionStateError(ValidationError):
    """A timer transition is not allowed from the current state."""
