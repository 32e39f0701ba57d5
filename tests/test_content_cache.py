import asyncio

import pytest

from vitality.infra.redis_cache import RedisArtifactStore
from vitality.infra.redis_client import get_redis
from vitality.services.content_cache import SessionContentCache


def _counting_factory(locator="data:image/png;base64,AAAA", delay=0.0):
    calls = 0

    async def factory():
        nonlocal calls
        calls += 1
        await asyncio.sleep(delay)
        return locator

    factory.calls = lambda: calls
    return factory


@pytest.mark.asyncio
async def test_second_request_reuses_cached_locator():
    cache = SessionContentCache()
    factory = _counting_factory()

    first = await cache.get_or_create("Grilled Salmon", factory)
    second = await cache.get_or_create("Grilled Salmon", factory)

    assert first == second == "data:image/png;base64,AAAA"
    assert factory.calls() == 1


@pytest.mark.asyncio
async def test_simultaneous_requests_share_one_generation():
    cache = SessionContentCache()
    factory = _counting_factory(delay=0.01)

    results = await asyncio.gather(
        cache.get_or_create("Grilled Salmon", factory),
        cache.get_or_create("Grilled Salmon", factory),
    )

    assert factory.calls() == 1
    assert results[0] == results[1]


@pytest.mark.asyncio
async def test_different_keys_generate_independently():
    cache = SessionContentCache()
    factory = _counting_factory()

    await asyncio.gather(
        cache.get_or_create("Oat Bowl", factory),
        cache.get_or_create("Greek Yogurt", factory),
    )

    assert factory.calls() == 2


@pytest.mark.asyncio
async def test_replace_overrides_without_invoking_factory():
    cache = SessionContentCache()
    factory = _counting_factory()
    await cache.get_or_create("Grilled Salmon", factory)

    await cache.replace("Grilled Salmon", "data:image/png;base64,EDITED")
    result = await cache.get_or_create("Grilled Salmon", factory)

    assert result == "data:image/png;base64,EDITED"
    assert factory.calls() == 1


@pytest.mark.asyncio
async def test_replace_during_generation_wins():
    cache = SessionContentCache()
    factory = _counting_factory(delay=0.01)

    pending = asyncio.create_task(cache.get_or_create("Grilled Salmon", factory))
    await asyncio.sleep(0)
    await cache.replace("Grilled Salmon", "data:image/png;base64,EDITED")
    await pending

    assert await cache.get("Grilled Salmon") == "data:image/png;base64,EDITED"


@pytest.mark.asyncio
async def test_empty_locator_is_not_cached():
    cache = SessionContentCache()
    factory = _counting_factory(locator="")

    assert await cache.get_or_create("Mystery Meal", factory) == ""
    assert await cache.get_or_create("Mystery Meal", factory) == ""
    assert factory.calls() == 2


@pytest.mark.asyncio
async def test_factory_failure_reaches_all_waiters_and_is_not_cached():
    cache = SessionContentCache()
    calls = 0

    async def broken():
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        raise RuntimeError("boom")

    results = await asyncio.gather(
        cache.get_or_create("Burpee", broken),
        cache.get_or_create("Burpee", broken),
        return_exceptions=True,
    )

    assert calls == 1
    assert all(isinstance(r, RuntimeError) for r in results)
    assert await cache.get("Burpee") is None


@pytest.mark.asyncio
async def test_redis_backing_store_shares_entries_across_cache_objects():
    factory = _counting_factory(locator="https://video/abc?key=k")
    first = SessionContentCache(RedisArtifactStore("videos"), name="videos")
    second = SessionContentCache(RedisArtifactStore("videos"), name="videos")

    await first.get_or_create("Barbell Squat", factory)
    result = await second.get_or_create("Barbell Squat", factory)

    assert result == "https://video/abc?key=k"
    assert factory.calls() == 1

    r = await get_redis()
    assert await r.get("vitality:artifact:videos:Barbell Squat") == "https://video/abc?key=k"
    assert await r.ttl("vitality:artifact:videos:Barbell Squat") == -1
