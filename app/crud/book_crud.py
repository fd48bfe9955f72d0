import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exception_utils import handle_exceptions
from app.core.exceptions import ResourceAlreadyExists, StoreError
from app.models.book_model import Book

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository providing consistent interface for database operations."""

    def __init__(self, model: type[T]):
        self.model = model

    @abstractmethod
    async def get(self, *, obj_id: int) -> Optional[T]:
        """Get a live entity by its primary key."""
        pass

    @abstractmethod
    async def create(self, *, obj_in: T) -> T:
        """Insert a new entity."""
        pass

    @abstractmethod
    async def update(self, *, obj_id: int, fields_to_update: Dict[str, Any]) -> Optional[T]:
        """Update an existing entity in place."""
        pass

    @abstractmethod
    async def delete(self, *, obj_id: int) -> bool:
        """Soft-delete an entity by its primary key."""
        pass


class BookRepository(BaseRepository[Book]):
    """
    Repository for all database operations related to the Book model.

    Every read excludes soft-deleted rows. "Not found" is reported as None
    (or False for delete); any other database failure becomes StoreError.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Book)
        self.db = db
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _live(self):
        return select(self.model).where(self.model.deleted_at.is_(None))

    @handle_exceptions(
        default_exception=StoreError,
        message="Failed to fetch books",
    )
    async def get_all(self) -> List[Book]:
        """Retrieves every live book ordered by id."""
        statement = self._live().order_by(self.model.id)
        result = await self.db.execute(statement)
        return list(result.scalars().all())

    @handle_exceptions(
        default_exception=StoreError,
        message="Failed to fetch book",
    )
    async def get(self, *, obj_id: int) -> Optional[Book]:
        """Retrieves a live book by its ID."""
        statement = self._live().where(self.model.id == obj_id)
        result = await self.db.execute(statement)
        return result.scalars().first()

    @handle_exceptions(
        default_exception=StoreError,
        message="Failed to check ISBN uniqueness",
    )
    async def get_by_isbn(
        self, *, isbn: str, exclude_id: Optional[int] = None
    ) -> Optional[Book]:
        """Retrieves a live book by ISBN, optionally ignoring one ID."""
        statement = self._live().where(self.model.isbn == isbn)
        if exclude_id is not None:
            statement = statement.where(self.model.id != exclude_id)
        result = await self.db.execute(statement)
        return result.scalars().first()

    @handle_exceptions(
        default_exception=StoreError,
        message="Failed to create book",
    )
    async def create(self, *, obj_in: Book) -> Book:
        """Insert a pre-constructed Book and return it with its assigned ID."""
        now = datetime.now(timezone.utc)
        obj_in.created_at = now
        obj_in.updated_at = now

        isbn = obj_in.isbn
        self.db.add(obj_in)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ResourceAlreadyExists(
                f"Book with ISBN {isbn} already exists.",
                error=str(e.orig),
                resource_type="Book",
            ) from e
        await self.db.refresh(obj_in)
        self._logger.info(f"Book created: {obj_in.id}")
        return obj_in

    @handle_exceptions(
        default_exception=StoreError,
        message="Failed to update book",
    )
    async def update(
        self, *, obj_id: int, fields_to_update: Dict[str, Any]
    ) -> Optional[Book]:
        """Apply `fields_to_update` to a live book. Returns None if it is gone."""
        result = await self.db.execute(self._live().where(self.model.id == obj_id))
        book = result.scalars().first()
        if book is None:
            return None

        for field, value in fields_to_update.items():
            if field in {"id", "created_at", "updated_at", "deleted_at"}:
                continue
            setattr(book, field, value)
        book.updated_at = datetime.now(timezone.utc)
        isbn = book.isbn

        self.db.add(book)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ResourceAlreadyExists(
                f"Book with ISBN {isbn} already exists.",
                error=str(e.orig),
                resource_type="Book",
            ) from e
        await self.db.refresh(book)

        self._logger.info(
            f"Book fields updated for {book.id}: {list(fields_to_update.keys())}"
        )
        return book

    @handle_exceptions(
        default_exception=StoreError,
        message="Failed to delete book",
    )
    async def delete(self, *, obj_id: int) -> bool:
        """Soft-delete a live book. Returns False if there was nothing to delete."""
        statement = (
            update(self.model)
            .where(self.model.id == obj_id, self.model.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(statement)
        await self.db.commit()

        deleted = result.rowcount > 0
        if deleted:
            self._logger.info(f"Book soft deleted: {obj_id}")
        return deleted
