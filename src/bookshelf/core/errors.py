"""Exceptions raised by the bookshelf core."""

from __future__ import annotations


class BookshelfError(Exception):
    pass


class BookNotFoundError(BookshelfError, LookupError):
    def __init__(self, book_id: str):
        super().__init__(f"Book with id {book_id} not found")
        self.book_id = book_id


class DuplicateBookError(BookshelfError, ValueError):
    def __init__(self, book_id: str):
        super().__init__(f"Book with id {book_id} already exists")
        self.book_id = book_id


class StoreNotReadyError(BookshelfError, RuntimeError):
    """Raised when the collection is used before its initial load."""


class StorageError(BookshelfError):
    """Durable storage could not be read or written."""
