"""Data models for tracked books."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum


class ReadingStatus(str, Enum):
    WANT_TO_READ = "wantToRead"
    READING = "reading"
    COMPLETED = "completed"


# Python attribute -> stored JSON key
_WIRE_NAMES = {
    "id": "id",
    "title": "title",
    "author": "author",
    "status": "status",
    "genre": "genre",
    "publication_date": "publicationDate",
    "page_count": "pageCount",
    "current_page": "currentPage",
    "cover_image": "coverImage",
    "start_date": "startDate",
    "end_date": "endDate",
    "isbn": "isbn",
    "publisher": "publisher",
    "language": "language",
    "notes": "notes",
    "rating": "rating",
}
_ATTR_NAMES = {wire: attr for attr, wire in _WIRE_NAMES.items()}


def generate_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Book:
    id: str
    title: str
    author: str
    status: ReadingStatus = ReadingStatus.WANT_TO_READ
    genre: str | None = None
    publication_date: str | None = None
    page_count: int | None = None
    current_page: int | None = None
    cover_image: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    isbn: str | None = None
    publisher: str | None = None
    language: str | None = None
    notes: str | None = None
    rating: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.status, ReadingStatus):
            object.__setattr__(self, "status", ReadingStatus(self.status))

    def to_dict(self) -> dict:
        """Serialize to the stored camelCase shape, leaving out unset fields."""
        data: dict = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, ReadingStatus):
                value = value.value
            data[_WIRE_NAMES[f.name]] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping) -> Book:
        """Build a record from its stored form.

        Raises KeyError when id/title/author are missing and ValueError on an
        unknown status, so callers can treat either as a corrupt record.
        """
        kwargs = {attr: data[wire] for wire, attr in _ATTR_NAMES.items() if data.get(wire) is not None}
        for required in ("id", "title", "author"):
            if required not in kwargs:
                raise KeyError(required)
        return cls(**kwargs)

    @classmethod
    def from_form(cls, data: Mapping, book_id: str | None = None) -> Book:
        """Build a record from form data.

        Accepts snake_case or camelCase keys. The id comes from ``book_id``,
        then the data itself, then a freshly generated one.
        """
        kwargs = {}
        for key, value in data.items():
            attr = _ATTR_NAMES.get(key, key)
            if attr in _WIRE_NAMES and value is not None:
                kwargs[attr] = value
        kwargs["id"] = book_id or kwargs.get("id") or generate_id()
        return cls(**kwargs)
