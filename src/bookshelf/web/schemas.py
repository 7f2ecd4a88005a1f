"""Request bodies accepted by the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.models import ReadingStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class BookIn(CamelModel):
    id: str | None = None
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    status: ReadingStatus = ReadingStatus.WANT_TO_READ
    genre: str | None = None
    publication_date: str | None = None
    page_count: int | None = Field(default=None, ge=0)
    current_page: int | None = Field(default=None, ge=0)
    cover_image: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    isbn: str | None = None
    publisher: str | None = None
    language: str | None = None
    notes: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)


class StatusChange(CamelModel):
    status: ReadingStatus
    end_date: str | None = None


class ProgressChange(CamelModel):
    current_page: int = Field(ge=0)
