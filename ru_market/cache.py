from collections.abc import Awaitable, Callable
from typing import Any

from cachetools import TTLCache
from loguru import logger

import ru_market.config as conf


class EntityCache:
    """
    Короткоживущий read-through кэш сущностей по их id.
    Хранит только pydantic-схемы, пустые результаты не кэшируются.
    """

    def __init__(self, maxsize: int, ttl: float):
        self._cache = TTLCache(maxsize=maxsize, ttl=ttl)

    @staticmethod
    def key(kind: str, entity_id: Any) -> str:
        return f'{kind}:{entity_id}'

    async def get_or_load(
        self,
        kind: str,
        entity_id: Any,
        loader: Callable[[], Awaitable[Any]],
    ):
        key = self.key(kind, entity_id)
        value = self._cache.get(key)
        if value is not None:
            return value
        value = await loader()
        if value is not None:
            self._cache[key] = value
        return value

    def invalidate(self, kind: str, entity_id: Any) -> None:
        if self._cache.pop(self.key(kind, entity_id), None) is not None:
            logger.debug(f'Cache entry {kind}:{entity_id} invalidated')

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


entity_cache = EntityCache(conf.CACHE_MAXSIZE, conf.CACHE_TTL_SECONDS)


def get_entity_cache() -> EntityCache:
    return entity_cache
