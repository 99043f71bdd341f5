from datetime import timedelta
from typing import Annotated, AsyncGenerator, List

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import SessionLocal
from app.repositories.clients import ClientRepository
from app.repositories.invoices import InvoiceRepository
from app.services.base import CacheWarmable
from app.services.clients import ClientService
from app.services.invoices import InvoiceService
from app.utils.caching import Cache, cache
from app.utils.logging import get_logger

logger = get_logger()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.warning(f"Database transaction rolled back: {e!r}")
            raise


def get_cache() -> Cache:
    return cache


DBDependency = Annotated[AsyncSession, Depends(get_db)]
CacheDependency = Annotated[Cache, Depends(get_cache)]


def cache_expiration() -> timedelta:
    return timedelta(seconds=settings.CACHE_EXPIRE_SECONDS)


def get_client_service(db: DBDependency, cache: CacheDependency) -> ClientService:
    return ClientService(ClientRepository(db), cache, expiration=cache_expiration())


def get_invoice_service(db: DBDependency, cache: CacheDependency) -> InvoiceService:
    return InvoiceService(
        InvoiceRepository(db),
        cache,
        ClientRepository(db),
        expiration=cache_expiration(),
    )


ClientServiceDependency = Annotated[ClientService, Depends(get_client_service)]
InvoiceServiceDependency = Annotated[InvoiceService, Depends(get_invoice_service)]


def get_cache_warmables(
    clients: ClientServiceDependency, invoices: InvoiceServiceDependency
) -> List[CacheWarmable]:
    return [clients, invoices]


CacheWarmablesDependency = Annotated[List[CacheWarmable], Depends(get_cache_warmables)]
