from typing import Dict

from fastapi import APIRouter

from app.core.dependencies import CacheWarmablesDependency
from app.core.responses import APIResponse, send_success
from app.services.cache_warmup import refresh_all

router = APIRouter(prefix="/cache", tags=["Cache"])


@router.post("/refresh", response_model=APIResponse[Dict[str, int]])
async def refresh_cache(warmables: CacheWarmablesDependency):
    return send_success(
        message="Cache refreshed for all entities", data=await refresh_all(warmables)
    )
