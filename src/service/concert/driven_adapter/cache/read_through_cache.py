"""
Read-through cache

get_or_compute():
- Hit and decodable → return cached value as-is (may be stale until TTL or invalidation)
- Miss → compute, store with absolute expiration, return
- Undecodable payload → treated as a miss and overwritten
"""

from typing import Awaitable, Callable, TypeVar

from src.platform.logging.loguru_io import Logger
from src.service.concert.app.interface.i_cache_store import ICacheStore


_T = TypeVar('_T')


class ReadThroughCache:
    def __init__(self, store: ICacheStore) -> None:
        self.store = store

    async def get_or_compute(
        self,
        *,
        key: str,
        ttl_seconds: int,
        compute: Callable[[], Awaitable[_T]],
        serialize: Callable[[_T], str],
        deserialize: Callable[[str], _T],
    ) -> _T:
        cached = await self.store.get_string(key)
        if cached is not None:
            try:
                value = deserialize(cached)
                Logger.base.debug(f'🎯 [CACHE] Hit: {key}')
                return value
            except (ValueError, TypeError, KeyError) as e:
                Logger.base.warning(f'⚠️ [CACHE] Discarding undecodable entry {key}: {e}')

        Logger.base.debug(f'💨 [CACHE] Miss: {key}')
        value = await compute()
        await self.store.set_string(key, serialize(value), ttl_seconds=ttl_seconds)
        return value

    async def invalidate(self, key: str) -> None:
        await self.store.remove(key)
        Logger.base.debug(f'🧹 [CACHE] Invalidated: {key}')
