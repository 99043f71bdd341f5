from typing import Dict, Iterable

from app.services.base import CacheWarmable
from app.utils.logging import get_logger

logger = get_logger()


async def refresh_all(warmables: Iterable[CacheWarmable]) -> Dict[str, int]:
    """Reload every registered cache namespace; returns entries per entity."""
    result: Dict[str, int] = {}
    for service in warmables:
        result[service.entity_name] = await service.refresh_cache()
    logger.info(f"Cache warm-up complete: {result}")
    return result
