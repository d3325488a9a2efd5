"""
Liveness endpoints used by container orchestration and uptime checks.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/")
async def api_root():
    return {"message": "Running!"}


@router.get("/healthcheck")
async def health_check():
    """Returns 200 while the process is up. No dependencies are checked."""
    return {"status": "healthy", "timestamp": utc_timestamp()}
