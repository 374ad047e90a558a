from fastapi import APIRouter

from app.services.redis_service import redis_service

router = APIRouter(tags=["health"])


@router.get("/health", summary="Simple readiness check")
async def health_check() -> dict[str, str]:
    redis_ok = await redis_service.ping()
    return {"status": "ok", "redis": "ok" if redis_ok else "unavailable"}
