"""Health check endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vetconnect.cache.cache_service import redis_cache
from vetconnect.core.config import settings
from vetconnect.core.database import get_db, ping
from vetconnect.services.mirror_outbox import get_outbox

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health():
    return {"status": "ok", "env": settings.ENV}


@router.get("/ready")
async def readiness(db: Session = Depends(get_db)):
    """Local store reachability, geocoding cache status and the mirror backlog."""
    ping(db)

    cache = "disabled"
    if settings.GEOCODING_CACHE_ENABLED:
        cache = "ok" if await redis_cache.ping() else "unavailable"

    outbox = get_outbox()
    return {
        "status": "ok",
        "database": "ok",
        "cache": cache,
        "mirror": {
            "pending": len(outbox.pending),
            "failed": len(outbox.failed),
            "delivered": outbox.delivered,
        },
    }
