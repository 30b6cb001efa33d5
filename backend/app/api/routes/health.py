"""Health check."""

from fastapi import APIRouter

from app import __version__
from app.config import settings
from app.schemas.system import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Lightweight liveness check; does not call Supabase."""
    return HealthResponse(
        version=__version__,
        supabase_configured=bool(settings.supabase_anon_key),
        bucket=settings.storage_bucket,
    )


@router.get("/ping")
async def ping():
    """Ultra-lightweight ping."""
    return {"status": "ok"}
