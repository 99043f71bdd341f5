from app.db.models.invoice import Invoice
from app.repositories.base import SQLAlchemyRepository


class InvoiceRepository(SQLAlchemyRepository[Invoice]):
    model = Invoice
