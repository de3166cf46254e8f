from unittest.mock import AsyncMock

import pytest

from src.service.concert.driven_adapter.cache.read_through_cache import ReadThroughCache


def _codec():
    return {'serialize': lambda value: ','.join(value), 'deserialize': lambda raw: raw.split(',')}


@pytest.mark.unit
class TestReadThroughCache:
    @pytest.mark.asyncio
    async def test_miss_computes_and_stores_with_ttl(self, cache_store):
        cache = ReadThroughCache(cache_store)
        compute = AsyncMock(return_value=['a', 'b'])

        result = await cache.get_or_compute(key='k', ttl_seconds=3600, compute=compute, **_codec())

        assert result == ['a', 'b']
        compute.assert_awaited_once()
        assert await cache_store.get_string('k') == 'a,b'
        assert cache_store.ttls['k'] == 3600

    @pytest.mark.asyncio
    async def test_hit_skips_compute(self, cache_store):
        await cache_store.set_string('k', 'x,y', ttl_seconds=60)
        cache = ReadThroughCache(cache_store)
        compute = AsyncMock(return_value=['fresh'])

        result = await cache.get_or_compute(key='k', ttl_seconds=60, compute=compute, **_codec())

        assert result == ['x', 'y']
        compute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_undecodable_payload_is_treated_as_miss(self, cache_store):
        await cache_store.set_string('k', 'garbage', ttl_seconds=60)
        cache = ReadThroughCache(cache_store)
        compute = AsyncMock(return_value=['fresh'])

        def deserialize(raw: str):
            raise ValueError(f'cannot decode {raw}')

        result = await cache.get_or_compute(
            key='k',
            ttl_seconds=60,
            compute=compute,
            serialize=lambda value: ','.join(value),
            deserialize=deserialize,
        )

        assert result == ['fresh']
        assert await cache_store.get_string('k') == 'fresh'

    @pytest.mark.asyncio
    async def test_invalidate_removes_entry(self, cache_store):
        await cache_store.set_string('k', 'v', ttl_seconds=60)

        await ReadThroughCache(cache_store).invalidate('k')

        assert await cache_store.get_string('k') is None
        assert cache_store.removed == ['k']
