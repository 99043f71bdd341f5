from datetime import timedelta
from typing import Any, Generic, List, Optional, Protocol, Tuple, Type, TypeVar

from pydantic import BaseModel

from app.core.exceptions.errors import NotFoundException
from app.db.base import Base
from app.repositories.base import Repository
from app.utils.caching import Cache
from app.utils.entity_cache import EntityCacheManager
from app.utils.logging import get_logger
from app.utils.mapping import apply_to_existing, to_entity, to_response, to_response_list

logger = get_logger()

ModelT = TypeVar("ModelT", bound=Base)
RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class CacheWarmable(Protocol):
    """Anything that can reload its whole cache namespace from the store."""

    entity_name: str

    async def refresh_cache(self) -> int: ...


class EntityService(Generic[ModelT, RequestT, ResponseT]):
    """Cache-aware CRUD for one entity kind.

    Reads go through the cache manager and fall back to the repository on a
    miss. Writes hit the repository first; only then is the per-id entry
    rewritten (or removed) and the collection snapshot rebuilt from the
    repository.

    Cache writes that follow a committed write are best-effort: a failure is
    logged, both affected keys are invalidated, and the operation still
    succeeds. Two concurrent writers may leave either one's collection
    snapshot in the cache until the next write or TTL expiry.
    """

    prefix: str
    entity_name: str
    label: str
    model: Type[ModelT]
    response_model: Type[ResponseT]
    keep_when_missing: Tuple[str, ...] = ()

    def __init__(
        self,
        repository: Repository[ModelT],
        cache: Cache,
        expiration: Optional[timedelta] = None,
    ):
        self.repository = repository
        self.entity_cache = EntityCacheManager(
            cache, self.prefix, self.response_model, expiration=expiration
        )

    def validate(self, request: RequestT) -> None:
        raise NotImplementedError

    async def check_references(self, request: RequestT) -> None:
        """Hook for checks that need the store; runs before any write."""

    def not_found(self, id: Any) -> NotFoundException:
        return NotFoundException(f"{self.label} not found with id: {id}")

    async def get_all(self) -> List[ResponseT]:
        async def load():
            responses = await self._load_all()
            if not responses:
                raise NotFoundException(f"No {self.entity_name.lower()} found")
            return responses

        return await self.entity_cache.get_all(load)

    async def get_by_id(self, id: int) -> ResponseT:
        async def load():
            entity = await self.repository.find_by_id(id)
            if entity is None:
                raise self.not_found(id)
            return to_response(entity, self.response_model)

        return await self.entity_cache.get_by_id(id, load)

    async def create(self, request: RequestT) -> ResponseT:
        self.validate(request)
        await self.check_references(request)

        saved = await self.repository.save(to_entity(request, self.model))
        response = to_response(saved, self.response_model)
        logger.info(f"{self.label} {response.id} created")

        await self._sync_cache(response.id, response)
        return response

    async def update(self, id: int, request: RequestT) -> ResponseT:
        self.validate(request)
        existing = await self.repository.find_by_id(id)
        if existing is None:
            raise self.not_found(id)
        await self.check_references(request)

        apply_to_existing(request, existing, self.keep_when_missing)
        updated = await self.repository.save(existing)
        response = to_response(updated, self.response_model)
        logger.info(f"{self.label} {id} updated")

        await self._sync_cache(id, response)
        return response

    async def delete(self, id: int) -> None:
        if not await self.repository.exists_by_id(id):
            raise self.not_found(id)

        await self.repository.delete_by_id(id)
        logger.info(f"{self.label} {id} deleted")

        await self._sync_cache(id, None)

    async def refresh_cache(self) -> int:
        responses = await self._load_all()
        if responses:
            await self.entity_cache.set_items(responses)
        else:
            await self.entity_cache.remove_all()
        logger.info(f"Cache refreshed for {self.entity_name}: {len(responses)} entries")
        return len(responses)

    async def _load_all(self) -> List[ResponseT]:
        return to_response_list(await self.repository.find_all(), self.response_model)

    async def _publish_all(self) -> None:
        # Empty snapshots are never stored; the loader reports an empty store.
        responses = await self._load_all()
        if responses:
            await self.entity_cache.set_all(responses)
        else:
            await self.entity_cache.remove_all()

    async def _sync_cache(self, id: int, response: Optional[ResponseT]) -> None:
        try:
            if response is None:
                await self.entity_cache.remove_by_id(id)
            else:
                await self.entity_cache.set_by_id(id, response)
            await self._publish_all()
        except Exception:
            logger.opt(exception=True).warning(
                f"Cache update failed after writing {self.label} {id}; invalidating"
            )
            await self._invalidate(id)

    async def _invalidate(self, id: int) -> None:
        for key, remove in (
            (self.entity_cache.id_key(id), lambda: self.entity_cache.remove_by_id(id)),
            (self.entity_cache.all_key(), self.entity_cache.remove_all),
        ):
            try:
                await remove()
            except Exception:
                logger.opt(exception=True).error(f"Cache invalidation failed for {key}")
