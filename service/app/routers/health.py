"""Liveness endpoint for load balancers and uptime checks."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/api/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": "dsolar-chat"}
