# tests/services/test_cache_service.py
from datetime import datetime, timezone
from typing import List

import pytest

from app.core.exceptions import CacheDeserializationError, CacheError, CacheMiss
from app.schemas.book_schema import BookResponse
from app.services.cache_service import DEFAULT_TTL_SECONDS, CacheService
from tests.mocks.mock_redis import FailingRedis, FakeRedis, UndecodableRedis

pytestmark = pytest.mark.asyncio


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def cache(fake_redis: FakeRedis) -> CacheService:
    return CacheService(fake_redis)


@pytest.fixture
def book() -> BookResponse:
    now = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    return BookResponse(
        id=7,
        title="Dune",
        author="Frank Herbert",
        isbn="978-0441172719",
        published_year=1965,
        genre="Science Fiction",
        available_copies=2,
        created_at=now,
        updated_at=now,
    )


# ==================== set / get ====================


async def test_set_then_get_returns_equal_model(cache: CacheService, book: BookResponse):
    await cache.set("book:7", book)

    cached = await cache.get("book:7", BookResponse)

    assert cached == book
    assert isinstance(cached.created_at, datetime)


async def test_set_then_get_list(cache: CacheService, book: BookResponse):
    other = book.model_copy(update={"id": 8, "isbn": "978-0441013593"})
    await cache.set("books:all", [book, other])

    cached = await cache.get("books:all", List[BookResponse])

    assert cached == [book, other]


async def test_set_uses_fifteen_minute_ttl(
    cache: CacheService, fake_redis: FakeRedis, book: BookResponse
):
    await cache.set("book:7", book)

    assert DEFAULT_TTL_SECONDS == 900
    assert fake_redis.ttls["book:7"] == 900


async def test_get_missing_key_raises_cache_miss(cache: CacheService):
    with pytest.raises(CacheMiss):
        await cache.get("book:404", BookResponse)


async def test_get_expired_key_raises_cache_miss(
    cache: CacheService, fake_redis: FakeRedis, book: BookResponse
):
    await cache.set("book:7", book)
    fake_redis.expire_now("book:7")

    with pytest.raises(CacheMiss):
        await cache.get("book:7", BookResponse)


async def test_get_garbage_raises_deserialization_error(
    cache: CacheService, fake_redis: FakeRedis
):
    await fake_redis.set("book:7", "not json at all")

    with pytest.raises(CacheDeserializationError):
        await cache.get("book:7", BookResponse)


async def test_get_wrong_shape_raises_deserialization_error(
    cache: CacheService, book: BookResponse
):
    await cache.set("book:7", book)

    with pytest.raises(CacheDeserializationError):
        await cache.get("book:7", List[BookResponse])


async def test_get_non_utf8_payload_raises_deserialization_error():
    cache = CacheService(UndecodableRedis())

    with pytest.raises(CacheDeserializationError):
        await cache.get("book:7", BookResponse)


# ==================== delete / delete_pattern ====================


async def test_delete_without_keys_is_noop(cache: CacheService, fake_redis: FakeRedis):
    await fake_redis.set("book:1", "{}")

    await cache.delete()

    assert "book:1" in fake_redis.store


async def test_delete_absent_key_is_idempotent(
    cache: CacheService, fake_redis: FakeRedis, book: BookResponse
):
    await cache.set("book:7", book)

    await cache.delete("book:7", "book:8")
    await cache.delete("book:7")

    assert fake_redis.store == {}


async def test_delete_pattern_removes_only_matches(
    cache: CacheService, fake_redis: FakeRedis
):
    for key in ("book:1", "book:2", "books:all", "author:1"):
        await fake_redis.set(key, "{}")

    removed = await cache.delete_pattern("book:*")

    assert removed == 2
    assert set(fake_redis.store) == {"books:all", "author:1"}


async def test_delete_pattern_with_no_matches_succeeds(cache: CacheService):
    assert await cache.delete_pattern("book:*") == 0
    assert await cache.delete_pattern("book:*") == 0


# ==================== transport failures ====================


async def test_transport_failures_raise_cache_error(book: BookResponse):
    cache = CacheService(FailingRedis())

    with pytest.raises(CacheError):
        await cache.set("book:7", book)
    with pytest.raises(CacheError):
        await cache.get("book:7", BookResponse)
    with pytest.raises(CacheError):
        await cache.delete("book:7")
    with pytest.raises(CacheError):
        await cache.delete_pattern("book:*")


async def test_unserializable_value_raises_cache_error(cache: CacheService):
    with pytest.raises(CacheError):
        await cache.set("thing", object())
