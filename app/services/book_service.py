import logging
import re
from typing import List, Optional

from app.core.exception_utils import raise_for_status
from app.core.exceptions import (
    CacheError,
    CacheMiss,
    InvalidArgument,
    ResourceAlreadyExists,
    ResourceNotFound,
)
from app.crud.book_crud import BookRepository
from app.models.book_model import Book
from app.schemas.book_schema import BookCreate, BookResponse, BookUpdate
from app.services.cache_service import CacheService

logger = logging.getLogger(__name__)

ALL_BOOKS_KEY = "books:all"
BOOK_KEY_PATTERN = "book:*"
MAX_BOOK_ID = 2**32 - 1

_DIGITS = re.compile(r"[0-9]+")


def book_key(book_id: int) -> str:
    return f"book:{book_id}"


class BookService:
    """
    Book business logic: cache-aside reads, ISBN uniqueness on writes, and
    cache invalidation after every successful mutation.

    The cache is optional. When it is absent or failing, every read goes to
    the repository and the results are identical.
    """

    def __init__(
        self, repository: BookRepository, cache: Optional[CacheService] = None
    ):
        self.book_repository = repository
        self.cache = cache
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # ======= READ OPERATIONS =======
    async def get_all_books(self) -> List[BookResponse]:
        """Get every live book, served from cache when possible."""
        cached = await self._cache_get(ALL_BOOKS_KEY, List[BookResponse])
        if cached is not None:
            return cached

        books = [
            BookResponse.model_validate(book)
            for book in await self.book_repository.get_all()
        ]
        await self._cache_set(ALL_BOOKS_KEY, books)

        self._logger.info(f"Book list retrieved : {len(books)} books returned")
        return books

    async def get_book_by_id(self, book_id: int) -> BookResponse:
        """Get a live book by its ID, served from cache when possible."""
        key = book_key(book_id)
        cached = await self._cache_get(key, BookResponse)
        if cached is not None:
            return cached

        book = await self.book_repository.get(obj_id=book_id)
        raise_for_status(
            condition=book is None,
            exception=ResourceNotFound,
            resource_type="Book",
            detail=f"Book with id {book_id} not found.",
        )

        response = BookResponse.model_validate(book)
        await self._cache_set(key, response)
        return response

    # ======= WRITE OPERATIONS =======
    async def create_book(self, book_in: BookCreate) -> BookResponse:
        """
        Create a book.

        The ISBN pre-check gives a clean conflict in the common case; a
        concurrent insert that slips past it is caught by the unique index
        and reported the same way by the repository.
        """
        await self._ensure_isbn_available(book_in.isbn)

        new_book = await self.book_repository.create(obj_in=Book(**book_in.model_dump()))
        await self._invalidate_cache()

        self._logger.info(
            f"New book created: {new_book.title}",
            extra={"book_id": new_book.id, "isbn": new_book.isbn},
        )
        return BookResponse.model_validate(new_book)

    async def update_book(self, book_id: int, book_in: BookUpdate) -> BookResponse:
        """Apply a partial update to a live book."""
        existing = await self.get_book_by_id(book_id)

        changes = book_in.changes()
        new_isbn = changes.get("isbn")
        if new_isbn is not None and new_isbn != existing.isbn:
            await self._ensure_isbn_available(new_isbn, exclude_id=book_id)

        updated = await self.book_repository.update(
            obj_id=book_id, fields_to_update=changes
        )
        # Deleted concurrently between the lookup and the write
        raise_for_status(
            condition=updated is None,
            exception=ResourceNotFound,
            resource_type="Book",
            detail=f"Book with id {book_id} not found.",
        )
        await self._invalidate_cache()

        self._logger.info(
            f"Book {book_id} updated",
            extra={"updated_book_id": book_id, "updated_fields": list(changes.keys())},
        )
        return BookResponse.model_validate(updated)

    async def delete_book(self, book_id: int) -> None:
        """Soft-delete a live book."""
        await self.get_book_by_id(book_id)

        deleted = await self.book_repository.delete(obj_id=book_id)
        raise_for_status(
            condition=not deleted,
            exception=ResourceNotFound,
            resource_type="Book",
            detail=f"Book with id {book_id} not found.",
        )
        await self._invalidate_cache()

        self._logger.warning(
            f"Book {book_id} deleted", extra={"deleted_book_id": book_id}
        )

    @staticmethod
    def parse_id(raw: str) -> int:
        """Parse a path identifier: decimal digits only, within 0..2**32-1."""
        if raw is None or not _DIGITS.fullmatch(raw):
            raise InvalidArgument("Invalid book ID", error=f"'{raw}' is not a valid book ID")
        book_id = int(raw)
        if book_id > MAX_BOOK_ID:
            raise InvalidArgument("Invalid book ID", error=f"'{raw}' is out of range")
        return book_id

    # Helper Functions
    async def _ensure_isbn_available(
        self, isbn: str, exclude_id: Optional[int] = None
    ) -> None:
        existing = await self.book_repository.get_by_isbn(
            isbn=isbn, exclude_id=exclude_id
        )
        raise_for_status(
            condition=existing is not None,
            exception=ResourceAlreadyExists,
            resource_type="Book",
            detail=f"Book with ISBN {isbn} already exists.",
        )

    async def _cache_get(self, key: str, type_):
        if self.cache is None:
            return None
        try:
            return await self.cache.get(key, type_)
        except CacheMiss:
            return None
        except CacheError:
            self._logger.warning(f"Cache lookup failed for key: {key}", exc_info=True)
            return None

    async def _cache_set(self, key: str, value) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.set(key, value)
        except CacheError:
            self._logger.warning(f"Failed to cache key: {key}", exc_info=True)

    async def _invalidate_cache(self) -> None:
        """Drop the list entry and every per-book entry. Runs after the commit."""
        if self.cache is None:
            return
        try:
            await self.cache.delete_pattern(BOOK_KEY_PATTERN)
        except CacheError:
            self._logger.warning("Failed to invalidate book cache", exc_info=True)
        try:
            await self.cache.delete(ALL_BOOKS_KEY)
        except CacheError:
            self._logger.warning("Failed to invalidate books list cache", exc_info=True)
