from fastapi import APIRouter, status

from app.core.dependencies import InvoiceServiceDependency
from app.core.responses import APIResponse, send_success
from app.db.schemas.invoice import InvoiceRequest, InvoiceResponse

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.get("/", response_model=APIResponse[list[InvoiceResponse]])
async def list_invoices(service: InvoiceServiceDependency):
    return send_success(message="Fetched", data=await service.get_all())


@router.get("/{invoice_id}", response_model=APIResponse[InvoiceResponse])
async def get_invoice(invoice_id: int, service: InvoiceServiceDependency):
    return send_success(message="Fetched", data=await service.get_by_id(invoice_id))


@router.post(
    "/",
    response_model=APIResponse[InvoiceResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(request: InvoiceRequest, service: InvoiceServiceDependency):
    return send_success(
        message="Created",
        data=await service.create(request),
        status_code=status.HTTP_201_CREATED,
    )


@router.put("/{invoice_id}", response_model=APIResponse[InvoiceResponse])
async def update_invoice(
    invoice_id: int, request: InvoiceRequest, service: InvoiceServiceDependency
):
    return send_success(
        message="Updated", data=await service.update(invoice_id, request)
    )


@router.delete("/{invoice_id}", response_model=APIResponse[str])
async def delete_invoice(invoice_id: int, service: InvoiceServiceDependency):
    await service.delete(invoice_id)
    return send_success(message="Deleted", data="Success")
