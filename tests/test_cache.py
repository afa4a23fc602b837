"""
Tests for the event listing cache: generation-based invalidation.
"""

import pytest
from httpx import AsyncClient

from tigertix.services import cache_service


class InMemoryRedis:
    """The handful of Redis commands the cache service issues."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value

    async def incr(self, key):
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value


@pytest.fixture
def redis_store(monkeypatch) -> InMemoryRedis:
    client = InMemoryRedis()

    async def fake_get_redis():
        return client

    monkeypatch.setattr(cache_service, "get_redis", fake_get_redis)
    return client


@pytest.mark.asyncio
async def test_cache_disabled_is_a_miss():
    assert await cache_service.get_event_list_version() is None
    assert await cache_service.get_cached_events(None) is None
    await cache_service.set_cached_events([{"id": 1}], None)
    await cache_service.invalidate_event_cache()


@pytest.mark.asyncio
async def test_invalidate_retires_current_generation(redis_store):
    version = await cache_service.get_event_list_version()
    assert version == 0
    await cache_service.set_cached_events([{"id": 1, "tickets": 5}], version)
    assert await cache_service.get_cached_events(version) == [{"id": 1, "tickets": 5}]

    await cache_service.invalidate_event_cache()

    current = await cache_service.get_event_list_version()
    assert current == 1
    assert await cache_service.get_cached_events(current) is None


@pytest.mark.asyncio
async def test_listing_served_from_cache(client: AsyncClient, redis_store, jazz_night):
    first = await client.get("/api/v1/events")
    assert first.json()["cached"] is False

    second = await client.get("/api/v1/events")
    assert second.json()["cached"] is True
    assert second.json()["events"][0]["tickets"] == 50


@pytest.mark.asyncio
async def test_booking_invalidates_listing(client: AsyncClient, redis_store, auth_headers, jazz_night):
    await client.get("/api/v1/events")

    await client.post(
        "/api/v1/bookings/confirm",
        json={"eventId": jazz_night.id, "tickets": 2},
        headers=auth_headers,
    )

    response = await client.get("/api/v1/events")
    assert response.json()["cached"] is False
    assert response.json()["events"][0]["tickets"] == 48


@pytest.mark.asyncio
async def test_listing_read_before_booking_cannot_repopulate_cache(
    client: AsyncClient, redis_store, auth_headers, jazz_night
):
    """A listing that read rows before a booking committed stores under a retired generation."""
    version_seen_by_slow_reader = await cache_service.get_event_list_version()
    stale_rows = [{"id": jazz_night.id, "name": "Jazz Night", "date": "2025-12-01", "tickets": 50}]

    booking = await client.post(
        "/api/v1/bookings/confirm",
        json={"eventId": jazz_night.id, "tickets": 2},
        headers=auth_headers,
    )
    assert booking.status_code == 200

    await cache_service.set_cached_events(stale_rows, version_seen_by_slow_reader)

    response = await client.get("/api/v1/events")
    assert response.json()["cached"] is False
    assert response.json()["events"][0]["tickets"] == 48


@pytest.mark.asyncio
async def test_admin_update_invalidates_listing(client: AsyncClient, redis_store, jazz_night):
    await client.get("/api/v1/events")

    await client.put(
        f"/api/v1/admin/events/{jazz_night.id}",
        json={"name": "Jazz Night", "date": "2025-12-01", "tickets": 70},
    )

    response = await client.get("/api/v1/events")
    assert response.json()["cached"] is False
    assert response.json()["events"][0]["tickets"] == 70
