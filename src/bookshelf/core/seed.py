"""Sample collection used when no saved collection exists."""

from __future__ import annotations

from .models import Book, ReadingStatus

SAMPLE_BOOKS: tuple[Book, ...] = (
    Book(
        id="1",
        title="The Great Gatsby",
        author="F. Scott Fitzgerald",
        genre="Classic Fiction",
        publication_date="1925-04-10",
        page_count=180,
        status=ReadingStatus.COMPLETED,
        start_date="2023-01-15",
        end_date="2023-01-30",
        isbn="9780743273565",
        publisher="Scribner",
        language="English",
        notes="A classic American novel about wealth, love, and the American Dream in the Roaring Twenties.",
        rating=4,
    ),
    Book(
        id="2",
        title="To Kill a Mockingbird",
        author="Harper Lee",
        genre="Classic Fiction",
        publication_date="1960-07-11",
        page_count=281,
        status=ReadingStatus.READING,
        current_page=120,
        start_date="2023-02-15",
        isbn="9780061120084",
        publisher="HarperPerennial Modern Classics",
        language="English",
    ),
    Book(
        id="3",
        title="1984",
        author="George Orwell",
        genre="Dystopian Fiction",
        publication_date="1949-06-08",
        page_count=328,
        status=ReadingStatus.WANT_TO_READ,
        isbn="9780451524935",
        publisher="Signet Classic",
        language="English",
    ),
)


def sample_books() -> list[Book]:
    return list(SAMPLE_BOOKS)
