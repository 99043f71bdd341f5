from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.core.config import settings
from app.core.dependencies import cache_expiration
from app.db.session import SessionLocal, init_db
from app.repositories.clients import ClientRepository
from app.repositories.invoices import InvoiceRepository
from app.services.cache_warmup import refresh_all
from app.services.clients import ClientService
from app.services.invoices import InvoiceService
from app.utils.caching import cache
from app.utils.logging import get_logger


async def warm_cache():
    async with SessionLocal() as db:
        clients = ClientRepository(db)
        return await refresh_all(
            [
                ClientService(clients, cache, expiration=cache_expiration()),
                InvoiceService(
                    InvoiceRepository(db), cache, clients, expiration=cache_expiration()
                ),
            ]
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger = get_logger()
    await init_db()
    await cache.init_redis()
    logger.info(f"Startup: {app.title} v{app.version} starting (cache={cache.cache_type})")
    if settings.CACHE_WARM_ON_STARTUP:
        await warm_cache()
    yield
    # Shutdown
    await cache.close()
    logger.info("Shutdown: App shutting down...")
