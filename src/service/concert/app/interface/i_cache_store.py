from abc import ABC, abstractmethod
from typing import Optional


class ICacheStore(ABC):
    """Distributed string cache with absolute expiration"""

    @abstractmethod
    async def get_string(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set_string(self, key: str, value: str, *, ttl_seconds: int) -> None:
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        pass
