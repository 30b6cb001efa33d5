"""Health schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    service: str = "tododrive"
    supabase_configured: bool = False
    bucket: str
