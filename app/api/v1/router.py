from fastapi import APIRouter

from app.api.v1.endpoints.cache import router as cache_router
from app.api.v1.endpoints.clients import router as clients_router
from app.api.v1.endpoints.invoices import router as invoices_router

router = APIRouter(prefix="/api/v1")
router.include_router(clients_router)
router.include_router(invoices_router)
router.include_router(cache_router)
