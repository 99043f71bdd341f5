from datetime import timedelta
from operator import attrgetter
from typing import Any, Awaitable, Callable, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter

from app.utils.caching import Cache
from app.utils.logging import get_logger

logger = get_logger()

T = TypeVar("T", bound=BaseModel)

DEFAULT_EXPIRATION = timedelta(minutes=5)


class EntityCacheManager(Generic[T]):
    """Cache-aside helper for one entity kind.

    Per-item entries live at ``{prefix}_{id}`` and the full collection at
    ``{prefix}_all``. Reads populate on miss via a loader; writes remove the
    key before writing, so once a write returns the key holds the new value
    or nothing. A failing loader propagates and writes nothing.
    """

    def __init__(
        self,
        cache: Cache,
        prefix: str,
        model: Type[T],
        id_getter: Callable[[T], Any] = attrgetter("id"),
        expiration: Optional[timedelta] = None,
    ):
        self.cache = cache
        self.prefix = prefix
        self.model = model
        self.id_getter = id_getter
        self.expiration = expiration or DEFAULT_EXPIRATION
        self._list_adapter = TypeAdapter(List[model])

    def id_key(self, id: Any) -> str:
        return f"{self.prefix}_{id}"

    def all_key(self) -> str:
        return f"{self.prefix}_all"

    async def get_by_id(self, id: Any, loader: Callable[[], Awaitable[T]]) -> T:
        key = self.id_key(id)
        cached = await self.cache.get_string(key)
        if cached:
            logger.debug(f"Cache hit: {key}")
            return self.model.model_validate_json(cached)

        logger.debug(f"Cache miss: {key}")
        value = await loader()
        await self.cache.set_string(key, value.model_dump_json(), self.expiration)
        return value

    async def set_by_id(self, id: Any, value: T):
        key = self.id_key(id)
        await self.cache.remove(key)
        await self.cache.set_string(key, value.model_dump_json(), self.expiration)

    async def remove_by_id(self, id: Any):
        await self.cache.remove(self.id_key(id))

    async def get_all(self, loader: Callable[[], Awaitable[List[T]]]) -> List[T]:
        key = self.all_key()
        cached = await self.cache.get_string(key)
        if cached:
            logger.debug(f"Cache hit: {key}")
            return self._list_adapter.validate_json(cached)

        logger.debug(f"Cache miss: {key}")
        values = await loader()
        await self.cache.set_string(key, self._dump_list(values), self.expiration)
        return values

    async def set_all(self, values: List[T]):
        key = self.all_key()
        await self.cache.remove(key)
        await self.cache.set_string(key, self._dump_list(values), self.expiration)

    async def remove_all(self):
        await self.cache.remove(self.all_key())

    async def set_items(self, values: List[T]) -> int:
        """Write the collection snapshot and every per-id entry."""
        await self.set_all(values)
        for value in values:
            await self.set_by_id(self.id_getter(value), value)
        return len(values)

    def _dump_list(self, values: List[T]) -> str:
        return self._list_adapter.dump_json(values).decode("utf-8")
