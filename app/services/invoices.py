from datetime import timedelta
from typing import Optional

from app.core.exceptions.errors import ValidationException
from app.db.models.client import Client
from app.db.models.invoice import Invoice
from app.db.schemas.invoice import InvoiceRequest, InvoiceResponse
from app.repositories.base import Repository
from app.services.base import EntityService
from app.utils.caching import Cache
from app.validators.invoice import validate_invoice_request


class InvoiceService(EntityService[Invoice, InvoiceRequest, InvoiceResponse]):
    prefix = "invoice"
    entity_name = "Invoices"
    label = "Invoice"
    model = Invoice
    response_model = InvoiceResponse
    keep_when_missing = ("date_issued",)

    def __init__(
        self,
        repository: Repository[Invoice],
        cache: Cache,
        client_repository: Repository[Client],
        expiration: Optional[timedelta] = None,
    ):
        super().__init__(repository, cache, expiration=expiration)
        self.client_repository = client_repository

    def validate(self, request: InvoiceRequest) -> None:
        validate_invoice_request(request)

    async def check_references(self, request: InvoiceRequest) -> None:
        if not await self.client_repository.exists_by_id(request.client_id):
            raise ValidationException.for_field(
                "client_id", f"Client not found with id: {request.client_id}"
            )
