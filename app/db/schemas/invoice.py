from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class InvoiceRequest(BaseModel):
    client_id: int = 0
    invoice_number: str = ""
    amount: Decimal = Decimal("0")
    notes: Optional[str] = None
    date_issued: Optional[date] = None  # today on create, unchanged on update


class InvoiceResponse(BaseModel):
    id: int
    client_id: int
    invoice_number: str
    date_issued: date
    amount: Decimal
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
