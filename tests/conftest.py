import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CACHE_TYPE", "inmemory")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.dependencies import get_cache, get_db
from app.db.base import Base
from app.db.session import enable_sqlite_foreign_keys
from app.repositories.clients import ClientRepository
from app.repositories.invoices import InvoiceRepository
from app.services.clients import ClientService
from app.services.invoices import InvoiceService
from app.utils.caching import Cache
from main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """Fresh in-memory database per test, shared by every session of that test."""
    test_engine = enable_sqlite_foreign_keys(
        create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache():
    return Cache("inmemory")


@pytest.fixture
def client_service(db_session, cache):
    return ClientService(ClientRepository(db_session), cache)


@pytest.fixture
def invoice_service(db_session, cache):
    return InvoiceService(
        InvoiceRepository(db_session), cache, ClientRepository(db_session)
    )


@pytest.fixture
async def client(session_factory, cache):
    """Async HTTP client bound to the test database and cache."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
