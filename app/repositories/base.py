from typing import Generic, List, Optional, Protocol, Type, TypeVar

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Protocol[ModelT]):
    async def find_all(self) -> List[ModelT]: ...

    async def find_by_id(self, id: int) -> Optional[ModelT]: ...

    async def save(self, entity: ModelT) -> ModelT: ...

    async def delete_by_id(self, id: int) -> None: ...

    async def exists_by_id(self, id: int) -> bool: ...


class SQLAlchemyRepository(Generic[ModelT]):
    """Async repository over one mapped model.

    ``save`` and ``delete_by_id`` commit before returning, so callers only see
    durable results.
    """

    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_all(self) -> List[ModelT]:
        result = await self.db.execute(select(self.model).order_by(self.model.id))
        return list(result.scalars().all())

    async def find_by_id(self, id: int) -> Optional[ModelT]:
        return await self.db.get(self.model, id)

    async def save(self, entity: ModelT) -> ModelT:
        # 0 means "not yet persisted"; the database assigns the key
        if not entity.id:
            entity.id = None
        self.db.add(entity)
        await self._commit()
        await self.db.refresh(entity)
        return entity

    async def delete_by_id(self, id: int) -> None:
        entity = await self.find_by_id(id)
        if entity is not None:
            await self.db.delete(entity)
            await self._commit()

    async def exists_by_id(self, id: int) -> bool:
        return bool(await self.db.scalar(select(exists().where(self.model.id == id))))

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
