import json
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.exceptions.errors import NotFoundException, ValidationException
from app.db.models.client import Client
from app.db.schemas.client import ClientRequest, ClientResponse
from app.db.schemas.invoice import InvoiceRequest
from app.repositories.clients import ClientRepository
from app.repositories.invoices import InvoiceRepository
from app.services.cache_warmup import refresh_all
from app.services.clients import ClientService
from app.utils.caching import Cache


class FailingWriteCache(Cache):
    """Reads and removals work; every write fails like an unreachable backend."""

    def __init__(self):
        super().__init__("inmemory")

    async def set_string(self, key, value, expire=None):
        raise ConnectionError("cache backend unreachable")


class FailingReadCache(Cache):
    def __init__(self):
        super().__init__("inmemory")

    async def get_string(self, key):
        raise ConnectionError("cache backend unreachable")


def acme_request(**overrides):
    data = {"name": "Acme", "email": "a@b.com"}
    data.update(overrides)
    return ClientRequest(**data)


def invoice_request(client_id, **overrides):
    data = {"client_id": client_id, "invoice_number": "INV-001", "amount": Decimal("99.50")}
    data.update(overrides)
    return InvoiceRequest(**data)


async def cached_ids(cache, key):
    raw = await cache.get_string(key)
    return None if raw is None else [item["id"] for item in json.loads(raw)]


async def test_create_populates_item_and_collection(client_service, cache):
    created = await client_service.create(acme_request())

    assert created.id == 1
    assert await cache.get_string("client_1") == created.model_dump_json()
    assert await cached_ids(cache, "client_all") == [1]


async def test_get_by_id_missing_raises_and_caches_nothing(client_service, cache):
    with pytest.raises(NotFoundException) as exc_info:
        await client_service.get_by_id(999)

    assert exc_info.value.message == "Client not found with id: 999"
    assert await cache.get_string("client_999") is None


async def test_get_by_id_serves_cached_snapshot(client_service, db_session):
    created = await client_service.create(acme_request())

    # change the row behind the service's back
    row = await db_session.get(Client, created.id)
    row.name = "Changed"
    await db_session.commit()

    assert (await client_service.get_by_id(created.id)).name == "Acme"


async def test_get_by_id_loads_on_cold_cache(db_session, cache):
    db_session.add(Client(name="Acme", email="a@b.com"))
    await db_session.commit()
    service = ClientService(ClientRepository(db_session), cache)

    fetched = await service.get_by_id(1)

    assert fetched == ClientResponse(id=1, name="Acme", email="a@b.com")
    assert await cache.get_string("client_1") == fetched.model_dump_json()


async def test_get_all_on_empty_repository_raises_not_found(client_service, cache):
    with pytest.raises(NotFoundException) as exc_info:
        await client_service.get_all()

    assert exc_info.value.message == "No clients found"
    assert await cache.get_string("client_all") is None


async def test_get_all_returns_every_client(client_service):
    await client_service.create(acme_request())
    await client_service.create(acme_request(name="Globex", email="g@x.com"))

    names = [client.name for client in await client_service.get_all()]
    assert names == ["Acme", "Globex"]


async def test_invalid_create_touches_neither_store_nor_cache(client_service, cache, db_session):
    with pytest.raises(ValidationException) as exc_info:
        await client_service.create(acme_request(name="", email=""))

    assert [error.field for error in exc_info.value.errors] == ["name", "email"]
    assert await ClientRepository(db_session).find_all() == []
    assert cache._inmemory == {}


async def test_update_overwrites_row_and_cache(client_service, cache):
    created = await client_service.create(acme_request(phone="555"))

    updated = await client_service.update(
        created.id, acme_request(name="Acme Corp", company_name="Acme Holdings")
    )

    assert updated.name == "Acme Corp"
    assert updated.phone is None  # full overwrite, not a patch
    assert await cache.get_string("client_1") == updated.model_dump_json()
    raw_all = json.loads(await cache.get_string("client_all"))
    assert raw_all[0]["name"] == "Acme Corp"


async def test_update_missing_raises_before_any_write(client_service, cache):
    with pytest.raises(NotFoundException):
        await client_service.update(42, acme_request())

    assert cache._inmemory == {}


async def test_update_validates_before_lookup(client_service):
    with pytest.raises(ValidationException):
        await client_service.update(42, acme_request(email=""))


async def test_delete_removes_row_and_item_key(client_service, cache, db_session):
    first = await client_service.create(acme_request())
    second = await client_service.create(acme_request(name="Globex", email="g@x.com"))

    await client_service.delete(first.id)

    assert not await ClientRepository(db_session).exists_by_id(first.id)
    assert await cache.get_string("client_1") is None
    assert await cached_ids(cache, "client_all") == [second.id]


async def test_deleting_last_client_drops_collection_snapshot(client_service, cache):
    created = await client_service.create(acme_request())

    await client_service.delete(created.id)

    assert await cache.get_string("client_all") is None
    with pytest.raises(NotFoundException):
        await client_service.get_all()


async def test_delete_missing_raises(client_service):
    with pytest.raises(NotFoundException):
        await client_service.delete(7)


async def test_cache_write_failure_does_not_fail_create(db_session):
    service = ClientService(ClientRepository(db_session), FailingWriteCache())

    created = await service.create(acme_request())

    assert created.id == 1
    assert await ClientRepository(db_session).exists_by_id(1)
    assert service.entity_cache.cache._inmemory == {}


async def test_cache_read_failure_propagates(db_session):
    service = ClientService(ClientRepository(db_session), FailingReadCache())

    with pytest.raises(ConnectionError):
        await service.get_by_id(1)


async def test_refresh_cache_rewrites_everything(client_service, cache):
    await client_service.create(acme_request())
    await client_service.create(acme_request(name="Globex", email="g@x.com"))
    await cache.remove("client_1")
    await cache.remove("client_all")

    assert await client_service.refresh_cache() == 2

    assert await cached_ids(cache, "client_all") == [1, 2]
    assert await cache.get_string("client_1") is not None
    assert await cache.get_string("client_2") is not None


async def test_refresh_cache_on_empty_store(client_service, cache):
    assert await client_service.refresh_cache() == 0
    assert await cache.get_string("client_all") is None


async def test_invoice_lifecycle(client_service, invoice_service, cache):
    owner = await client_service.create(acme_request())

    invoice = await invoice_service.create(invoice_request(owner.id))

    assert invoice.client_id == owner.id
    assert invoice.amount == Decimal("99.50")
    assert await cached_ids(cache, "invoice_all") == [invoice.id]

    updated = await invoice_service.update(
        invoice.id, invoice_request(owner.id, amount=Decimal("120.00"), notes="revised")
    )
    assert (await invoice_service.get_by_id(invoice.id)) == updated
    assert updated.notes == "revised"

    await invoice_service.delete(invoice.id)
    assert await cache.get_string(f"invoice_{invoice.id}") is None


async def test_invoice_for_unknown_client_rejected(invoice_service, cache):
    with pytest.raises(ValidationException) as exc_info:
        await invoice_service.create(invoice_request(5))

    assert exc_info.value.errors[0].field == "client_id"
    assert cache._inmemory == {}


async def test_refresh_all_reports_counts_per_entity(client_service, invoice_service):
    owner = await client_service.create(acme_request())
    await invoice_service.create(invoice_request(owner.id))
    await invoice_service.create(invoice_request(owner.id, invoice_number="INV-002"))

    result = await refresh_all([client_service, invoice_service])

    assert result == {"Clients": 1, "Invoices": 2}


async def test_invoice_issue_date_defaults_to_today(client_service, invoice_service):
    owner = await client_service.create(acme_request())

    invoice = await invoice_service.create(invoice_request(owner.id))

    assert invoice.date_issued == date.today()


async def test_invoice_update_without_issue_date_keeps_stored_date(
    client_service, invoice_service
):
    owner = await client_service.create(acme_request())
    invoice = await invoice_service.create(
        invoice_request(owner.id, date_issued=date(2020, 1, 1))
    )

    updated = await invoice_service.update(
        invoice.id, invoice_request(owner.id, amount=Decimal("150.00"))
    )

    assert updated.amount == Decimal("150.00")
    assert updated.date_issued == date(2020, 1, 1)
    assert (await invoice_service.get_by_id(invoice.id)).date_issued == date(2020, 1, 1)


async def test_invoice_update_with_issue_date_overwrites_it(client_service, invoice_service):
    owner = await client_service.create(acme_request())
    invoice = await invoice_service.create(
        invoice_request(owner.id, date_issued=date(2020, 1, 1))
    )

    updated = await invoice_service.update(
        invoice.id, invoice_request(owner.id, date_issued=date(2021, 6, 30))
    )

    assert updated.date_issued == date(2021, 6, 30)


async def test_deleting_client_with_invoices_is_rejected(
    client_service, invoice_service, cache, db_session
):
    owner = await client_service.create(acme_request())
    invoice = await invoice_service.create(invoice_request(owner.id))

    with pytest.raises(IntegrityError):
        await client_service.delete(owner.id)

    assert await ClientRepository(db_session).exists_by_id(owner.id)
    assert await InvoiceRepository(db_session).exists_by_id(invoice.id)
    assert await cache.get_string(f"client_{owner.id}") is not None
    assert await cached_ids(cache, "client_all") == [owner.id]
