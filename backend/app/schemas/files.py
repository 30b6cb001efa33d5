"""Drive schemas."""

from datetime import datetime

from pydantic import BaseModel


class FileItem(BaseModel):
    """One stored object as shown in the drive listing."""
    id: str
    name: str  # sanitized object key
    size: int
    url: str
    created_at: datetime
    size_display: str = "0 B"


class DriveResponse(BaseModel):
    """Result of a drive API call."""
    success: bool
    error: str | None = None
    files: list[FileItem] = []


class DrivePage(BaseModel):
    """Drive page view model."""
    bucket: str
    public: bool = True
    files: list[FileItem] = []
    error: str | None = None
