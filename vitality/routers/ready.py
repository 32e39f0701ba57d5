from fastapi import APIRouter

from ..infra.redis_client import get_redis
from ..settings import settings

router = APIRouter()


@router.get("/ready")
async def ready():
    redis_ok = None
    if settings.cache_backend == "redis":
        redis_ok = False
        try:
            r = await get_redis()
            redis_ok = bool(await r.ping())
        except Exception:
            pass
    return {"ok": True, "cache_backend": settings.cache_backend, "redis_ok": redis_ok}
