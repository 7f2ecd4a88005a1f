"""Status and progress derivation rules for book records.

Every function here is pure: it takes a record and returns a new one, never
touching storage. ``today`` is an ISO date string supplied by the caller.
"""

from __future__ import annotations

from dataclasses import replace

from .models import Book, ReadingStatus

STATUS_LABELS = {
    ReadingStatus.WANT_TO_READ: "Want to Read",
    ReadingStatus.READING: "Currently Reading",
    ReadingStatus.COMPLETED: "Completed",
}


def apply_status(
    book: Book,
    status: ReadingStatus | str,
    today: str,
    end_date: str | None = None,
) -> Book:
    """Move a record to ``status``, stamping dates the first time.

    Entering ``reading`` sets start_date if it is unset. Entering
    ``completed`` sets end_date to ``end_date`` when given, otherwise keeps
    an existing end_date or falls back to today.
    """
    status = ReadingStatus(status)
    changes: dict = {"status": status}
    if status is ReadingStatus.READING and not book.start_date:
        changes["start_date"] = today
    if status is ReadingStatus.COMPLETED:
        changes["end_date"] = end_date or book.end_date or today
    return replace(book, **changes)


def has_known_length(book: Book) -> bool:
    return book.page_count is not None


def apply_progress(book: Book, current_page: int, today: str) -> Book:
    """Record ``current_page`` on a record.

    The record moves to ``reading`` unless the page reaches the known page
    count, in which case it is completed with today's end date and the page
    clamped to the page count.
    """
    updated = apply_status(book, ReadingStatus.READING, today)
    if has_known_length(book) and current_page >= book.page_count:
        updated = apply_status(updated, ReadingStatus.COMPLETED, today, end_date=today)
        current_page = book.page_count
    return replace(updated, current_page=current_page)


def progress_percentage(book: Book) -> int:
    """Rounded reading progress, 0 unless the book is being read."""
    if book.status is not ReadingStatus.READING:
        return 0
    if not book.current_page or not book.page_count:
        return 0
    return min(100, round(book.current_page / book.page_count * 100))


def status_label(status: ReadingStatus | str) -> str:
    return STATUS_LABELS[ReadingStatus(status)]
