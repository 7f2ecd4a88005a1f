"""FastAPI web application for Bookshelf."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from ..core.errors import BookNotFoundError, DuplicateBookError, StoreNotReadyError
from ..core.models import Book, ReadingStatus
from ..core.store import BookStore
from ..core.transitions import progress_percentage, status_label
from .schemas import BookIn, ProgressChange, StatusChange

load_dotenv()

log = structlog.get_logger()

VERSION = "0.1.0"


def _book_json(book: Book) -> dict:
    data = book.to_dict()
    data["statusLabel"] = status_label(book.status)
    data["progress"] = progress_percentage(book)
    return data


def get_store(request: Request) -> BookStore:
    return request.app.state.store


def create_app(store: BookStore | None = None) -> FastAPI:
    """Build the API around one store.

    Without an explicit store, one backed by the default storage file is
    created at startup. The store is loaded before the first request and
    closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.store is None:
            app.state.store = BookStore()
        await app.state.store.load()
        log.info("store_ready", books=len(app.state.store.books))
        yield
        app.state.store.close()

    app = FastAPI(title="Bookshelf", docs_url=None, redoc_url=None, lifespan=lifespan)
    app.state.store = store

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    @app.exception_handler(BookNotFoundError)
    async def not_found(request: Request, exc: BookNotFoundError):
        return JSONResponse({"error": str(exc)}, status_code=404)

    @app.exception_handler(DuplicateBookError)
    async def duplicate(request: Request, exc: DuplicateBookError):
        return JSONResponse({"error": str(exc)}, status_code=409)

    @app.exception_handler(StoreNotReadyError)
    async def not_ready(request: Request, exc: StoreNotReadyError):
        log.warning("store_not_ready", path=request.url.path)
        return JSONResponse({"error": "Books are still loading. Please try again."}, status_code=503)

    @app.get("/health")
    async def health(store: BookStore = Depends(get_store)):
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": VERSION,
            "environment": os.environ.get("ENV", "dev"),
            "ready": store.ready,
            "books": len(store.books) if store.ready else 0,
        }

    @app.get("/api/books")
    async def list_books(status: ReadingStatus | None = None, store: BookStore = Depends(get_store)):
        books = store.books if status is None else store.with_status(status)
        return [_book_json(b) for b in books]

    @app.get("/api/books/{book_id}")
    async def get_book(book_id: str, store: BookStore = Depends(get_store)):
        book = store.get(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return _book_json(book)

    @app.post("/api/books", status_code=201)
    async def add_book(body: BookIn, store: BookStore = Depends(get_store)):
        book = await store.add(body.model_dump(exclude_none=True))
        return _book_json(book)

    @app.put("/api/books/{book_id}")
    async def update_book(book_id: str, body: BookIn, store: BookStore = Depends(get_store)):
        book = Book.from_form(body.model_dump(exclude_none=True), book_id=book_id)
        return _book_json(await store.update(book))

    @app.delete("/api/books/{book_id}", status_code=204)
    async def delete_book(book_id: str, store: BookStore = Depends(get_store)):
        await store.delete(book_id)
        return Response(status_code=204)

    @app.post("/api/books/{book_id}/status")
    async def change_status(book_id: str, body: StatusChange, store: BookStore = Depends(get_store)):
        book = await store.update_status(book_id, body.status, end_date=body.end_date)
        return _book_json(book)

    @app.post("/api/books/{book_id}/progress")
    async def change_progress(book_id: str, body: ProgressChange, store: BookStore = Depends(get_store)):
        book = await store.update_progress(book_id, body.current_page)
        return _book_json(book)

    return app


app = create_app()


def main():
    port = int(os.environ.get("PORT", "8000"))
    is_dev = os.environ.get("ENV", "dev") == "dev"
    uvicorn.run(
        "bookshelf.web.app:app",
        host="0.0.0.0",
        port=port,
        reload=is_dev,
    )
