# app/models/book_model.py
"""
Book model definition.

Books are soft-deleted: `deleted_at` is set instead of removing the row, and
every normal read filters on `deleted_at IS NULL`. ISBN uniqueness is enforced
by a partial unique index over live rows only, so the ISBN of a deleted book
can be reused.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Index, func, text
from sqlmodel import Column, DateTime, Field, SQLModel

ACTIVE_ROWS = text("deleted_at IS NULL")


class BookBase(SQLModel):

    title: str = Field(
        min_length=1,
        max_length=255,
        description="The title of the book",
        schema_extra={"example": "The Go Programming Language"},
    )
    author: str = Field(
        min_length=1,
        max_length=255,
        description="The author of the book",
        schema_extra={"example": "Alan A. A. Donovan"},
    )
    isbn: str = Field(
        min_length=10,
        max_length=20,
        description="International Standard Book Number",
        schema_extra={"example": "978-0134190440"},
    )
    published_year: int = Field(
        ge=1000,
        le=2100,
        description="Year of publication",
        schema_extra={"example": 2015},
    )
    genre: str = Field(
        min_length=1,
        max_length=100,
        description="The genre of the book",
        schema_extra={"example": "Programming"},
    )
    available_copies: int = Field(
        default=0,
        ge=0,
        description="Number of copies available for lending",
        schema_extra={"example": 3},
    )


class Book(BookBase, table=True):
    __tablename__ = "books"
    __table_args__ = (
        Index(
            "uq_books_isbn_active",
            "isbn",
            unique=True,
            postgresql_where=ACTIVE_ROWS,
            sqlite_where=ACTIVE_ROWS,
        ),
        Index("idx_books_deleted_at", "deleted_at"),
        CheckConstraint("available_copies >= 0", name="ck_books_available_copies"),
    )

    id: Optional[int] = Field(
        default=None, primary_key=True, description="Store-assigned identifier"
    )

    created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
        description="Book creation timestamp",
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            server_onupdate=func.now(),
            nullable=False,
        ),
        description="Book last updated timestamp",
    )
    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="Soft-delete marker",
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')>"
