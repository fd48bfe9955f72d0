# app/utils/deps.py
"""
FastAPI dependencies.

Connection handles live on `app.state` and are opened by the lifespan
handler; a BookService is assembled per request from them.
"""
from typing import Optional

from fastapi import Depends, Path, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.crud.book_crud import BookRepository
from app.db.session import get_session
from app.services.book_service import BookService
from app.services.cache_service import CacheService


def get_cache(request: Request) -> Optional[CacheService]:
    """The cache, or None when caching is disabled or Redis is unreachable."""
    client = getattr(request.app.state, "redis", None)
    if client is None:
        return None
    return CacheService(client, ttl=settings.CACHE_TTL_SECONDS)


def get_book_service(
    db: AsyncSession = Depends(get_session),
    cache: Optional[CacheService] = Depends(get_cache),
) -> BookService:
    return BookService(BookRepository(db), cache=cache)


def get_book_id(book_id: str = Path(..., description="Book identifier")) -> int:
    """Parse the `{book_id}` path segment; malformed values become a 400."""
    return BookService.parse_id(book_id)
