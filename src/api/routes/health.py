"""Health check endpoint."""

from fastapi import APIRouter

from api.responses import success_response

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Liveness check. Does not touch the content store or GitHub."""
    return success_response({"status": "ok"})
