"""Cache store backed by Kvrocks (Redis protocol)"""

from typing import Optional

from redis.asyncio import Redis

from src.service.concert.app.interface.i_cache_store import ICacheStore


class RedisCacheStore(ICacheStore):
    def __init__(self, *, client: Redis, key_prefix: str = '') -> None:
        self.client = client
        self.key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f'{self.key_prefix}{key}'

    async def get_string(self, key: str) -> Optional[str]:
        value = await self.client.get(self._key(key))
        if value is None:
            return None
        # Pool may be configured with decode_responses=False
        if isinstance(value, bytes):
            return value.decode('utf-8')
        return value

    async def set_string(self, key: str, value: str, *, ttl_seconds: int) -> None:
        await self.client.set(self._key(key), value, ex=ttl_seconds)

    async def remove(self, key: str) -> None:
        await self.client.delete(self._key(key))
