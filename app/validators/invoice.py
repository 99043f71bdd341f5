from decimal import Decimal

from app.db.schemas.invoice import InvoiceRequest
from app.utils.validation import max_length, min_value, not_empty, raise_if_errors


def validate_invoice_request(request: InvoiceRequest) -> None:
    raise_if_errors(
        min_value(request.client_id, 1, "client_id"),
        not_empty(request.invoice_number, "invoice_number"),
        max_length(request.invoice_number, 50, "invoice_number"),
        min_value(request.amount, Decimal("0.01"), "amount"),
    )
