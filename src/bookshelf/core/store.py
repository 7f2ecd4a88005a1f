"""The book collection store: in-memory state mirrored to durable storage."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime, timezone

import structlog

from .errors import BookNotFoundError, DuplicateBookError, StorageError, StoreNotReadyError
from .models import Book, ReadingStatus, generate_id
from .seed import sample_books
from .storage import KeyValueStorage
from .transitions import apply_progress, apply_status

log = structlog.get_logger()

STORAGE_KEY = "bookshelf_books"


def utc_today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def decode_books(raw: str) -> list[Book]:
    """Parse a stored collection. Raises ValueError/KeyError/TypeError if corrupt."""
    data = json.loads(raw)
    if not isinstance(data, list):
        raise TypeError(f"expected a list of books, got {type(data).__name__}")
    books = []
    seen: set[str] = set()
    for item in data:
        if not isinstance(item, dict):
            raise TypeError(f"expected a book object, got {type(item).__name__}")
        book = Book.from_dict(item)
        if book.id in seen:
            raise ValueError(f"duplicate book id {book.id!r}")
        seen.add(book.id)
        books.append(book)
    return books


def encode_books(books: list[Book]) -> str:
    return json.dumps([book.to_dict() for book in books])


class BookStore:
    """Owns the collection of book records and is its only writer.

    Call ``await load()`` once before anything else. Every mutation replaces
    the in-memory list and then rewrites the whole collection to storage. A
    failed write is logged and leaves the store dirty; memory stays the source
    of truth for the session and ``flush()`` retries the write.

    Mutations and their writes are serialized with an asyncio lock so
    concurrent requests cannot interleave a read-modify-write.
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        today: Callable[[], str] = utc_today,
        storage_key: str = STORAGE_KEY,
    ) -> None:
        self.storage = storage if storage is not None else KeyValueStorage()
        self.storage_key = storage_key
        self._today = today
        self._books: list[Book] = []
        self._ready = False
        self._dirty = False
        self._lock = asyncio.Lock()

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def dirty(self) -> bool:
        """True while storage may not match memory (failed read or write)."""
        return self._dirty

    @property
    def books(self) -> list[Book]:
        self._require_ready()
        return list(self._books)

    async def load(self) -> None:
        """Read the saved collection, seeding sample books when there is none.

        An absent collection is seeded and written immediately. An unreadable
        one falls back to the samples in memory only, so the stored data is
        left for inspection. When storage itself cannot be read the store
        starts dirty and later writes fail and are logged.
        """
        async with self._lock:
            try:
                raw = await asyncio.to_thread(self.storage.get_item, self.storage_key)
            except StorageError as e:
                log.warning("books_load_failed", error=str(e))
                self._books = sample_books()
                self._dirty = True
            else:
                if raw is None:
                    self._books = sample_books()
                    await self._persist()
                    log.info("books_seeded", count=len(self._books))
                else:
                    try:
                        self._books = decode_books(raw)
                        log.info("books_loaded", count=len(self._books))
                    except (ValueError, KeyError, TypeError) as e:
                        log.warning("books_corrupt", error=str(e))
                        self._books = sample_books()
            self._ready = True

    def get(self, book_id: str) -> Book | None:
        self._require_ready()
        for book in self._books:
            if book.id == book_id:
                return book
        return None

    def with_status(self, status: ReadingStatus | str) -> list[Book]:
        self._require_ready()
        status = ReadingStatus(status)
        return [book for book in self._books if book.status is status]

    async def add(self, data: Mapping) -> Book:
        """Append a new record built from form data and return it.

        A caller-supplied id must not already be in use. Generated ids are
        re-rolled on the (unlikely) chance of a collision.
        """
        self._require_ready()
        async with self._lock:
            book = Book.from_form(data)
            taken = {b.id for b in self._books}
            if book.id in taken:
                if data.get("id"):
                    raise DuplicateBookError(book.id)
                while book.id in taken:
                    book = replace(book, id=generate_id())
            self._books = [*self._books, book]
            await self._persist()
        log.info("book_added", book_id=book.id, title=book.title)
        return book

    async def update(self, book: Book) -> Book:
        """Replace the record with the same id. Raises BookNotFoundError if absent."""
        self._require_ready()
        async with self._lock:
            await self._replace(book)
        log.info("book_updated", book_id=book.id)
        return book

    async def delete(self, book_id: str) -> None:
        self._require_ready()
        async with self._lock:
            remaining = [b for b in self._books if b.id != book_id]
            if len(remaining) == len(self._books):
                log.debug("book_delete_missing", book_id=book_id)
                return
            self._books = remaining
            await self._persist()
        log.info("book_deleted", book_id=book_id)

    async def update_status(
        self,
        book_id: str,
        status: ReadingStatus | str,
        end_date: str | None = None,
    ) -> Book:
        self._require_ready()
        async with self._lock:
            book = self._require(book_id)
            updated = apply_status(book, status, self._today(), end_date=end_date)
            await self._replace(updated)
        log.info("book_status_changed", book_id=book_id, status=updated.status.value)
        return updated

    async def update_progress(self, book_id: str, current_page: int) -> Book:
        """Record reading progress, completing the book at its last page."""
        self._require_ready()
        async with self._lock:
            book = self._require(book_id)
            updated = apply_progress(book, current_page, self._today())
            await self._replace(updated)
        log.info(
            "book_progress",
            book_id=book_id,
            current_page=updated.current_page,
            status=updated.status.value,
        )
        return updated

    async def flush(self) -> bool:
        """Retry a failed write. Returns True when storage matches memory."""
        async with self._lock:
            if not self._dirty:
                return True
            return await self._persist()

    def close(self) -> None:
        self.storage.close()

    def _require_ready(self) -> None:
        if not self._ready:
            raise StoreNotReadyError("Book collection has not finished loading")

    def _require(self, book_id: str) -> Book:
        for book in self._books:
            if book.id == book_id:
                return book
        raise BookNotFoundError(book_id)

    async def _replace(self, book: Book) -> None:
        for i, existing in enumerate(self._books):
            if existing.id == book.id:
                self._books = [*self._books[:i], book, *self._books[i + 1 :]]
                break
        else:
            raise BookNotFoundError(book.id)
        await self._persist()

    async def _persist(self) -> bool:
        payload = encode_books(self._books)
        try:
            await asyncio.to_thread(self.storage.set_item, self.storage_key, payload)
        except StorageError as e:
            self._dirty = True
            log.error("books_save_failed", error=str(e), count=len(self._books))
            return False
        self._dirty = False
        return True
