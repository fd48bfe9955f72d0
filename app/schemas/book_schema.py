# app/schemas/book_schema.py
"""
Book schemas for request/response models.

Request bodies are bounds-checked here, at the binding layer; the service
trusts its input. BookResponse is both the public shape of a book and the
shape stored in the cache.
"""
from datetime import datetime
from typing import Any, Dict, Optional, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

Title = Annotated[
    str,
    Field(
        min_length=1,
        max_length=255,
        description="The title of the book",
        examples=["The Go Programming Language"],
    ),
]
Author = Annotated[
    str,
    Field(
        min_length=1,
        max_length=255,
        description="The author of the book",
        examples=["Alan A. A. Donovan"],
    ),
]
ISBN = Annotated[
    str,
    Field(
        min_length=10,
        max_length=20,
        description="International Standard Book Number",
        examples=["978-0134190440"],
    ),
]
PublishedYear = Annotated[
    int,
    Field(ge=1000, le=2100, description="Year of publication", examples=[2015]),
]
Genre = Annotated[
    str,
    Field(
        min_length=1,
        max_length=100,
        description="The genre of the book",
        examples=["Programming"],
    ),
]
AvailableCopies = Annotated[
    int, Field(ge=0, description="Copies available for lending", examples=[3])
]


class StripWhitespaceMixin(BaseModel):

    @field_validator("title", "author", "genre", "isbn", mode="before", check_fields=False)
    @classmethod
    def strip_whitespace(cls, v: Any) -> Any:
        """Strip leading and trailing whitespace."""
        return v.strip() if isinstance(v, str) else v


class BookBase(BaseModel):
    """Base schema for book data."""

    title: Title
    author: Author
    isbn: ISBN
    published_year: PublishedYear
    genre: Genre
    available_copies: AvailableCopies = 0


class BookCreate(StripWhitespaceMixin, BookBase):
    """Schema for creating a new book."""

    pass


class BookUpdate(StripWhitespaceMixin):
    """
    Schema for a partial update.

    Only fields present in the request body are applied; omitted (or null)
    fields keep their stored values.
    """

    title: Optional[Title] = None
    author: Optional[Author] = None
    isbn: Optional[ISBN] = None
    published_year: Optional[PublishedYear] = None
    genre: Optional[Genre] = None
    available_copies: Optional[AvailableCopies] = None

    def changes(self) -> Dict[str, Any]:
        """Fields supplied by the caller, excluding explicit nulls."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class BookResponse(BookBase):
    """Public book representation."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier for the book")
    created_at: datetime = Field(..., description="When the book was created")
    updated_at: datetime = Field(..., description="When the book was last updated")


__all__ = [
    "BookBase",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
]
