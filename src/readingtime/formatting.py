"""Display strings shared by the screens."""

from __future__ import annotations

from readingtime.library.models import Book


def format_duration(seconds: float) -> str:
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def goal_label(accumulated_seconds: float, goal_minutes: float) -> str:
    return f"{int(accumulated_seconds / 60)}/{int(goal_minutes)} min"


def page_label(book: Book) -> str:
    return f"{book.current_page} of {book.total_pages} pages"


def progress_bar(fraction: float, width: int = 20) -> str:
    fraction = min(max(fraction, 0.0), 1.0)
    filled = int(round(fraction * width))
    return "█" * filled + "░" * (width - filled)
