"""Drive API: list, upload and delete objects in the storage bucket."""

import logging

from fastapi import APIRouter, Depends, File, Response, UploadFile

from app.api.deps import CurrentSession, require_session
from app.schemas.files import DriveResponse
from app.services import get_storage_bucket
from app.services.drive_service import DriveView
from app.services.storage_service import StorageBucket

logger = logging.getLogger(__name__)
router = APIRouter()


def _respond(view: DriveView, response: Response, ok: bool = True) -> DriveResponse:
    result = DriveResponse(success=ok and view.error is None, error=view.error, files=view.files)
    if not result.success:
        # The injected response carries any refreshed session cookies.
        response.status_code = 500
    return result


@router.get("/files", response_model=DriveResponse, response_model_exclude_none=True)
async def list_files(
    response: Response,
    session: CurrentSession = Depends(require_session),
    bucket: StorageBucket = Depends(get_storage_bucket),
):
    """All objects in the bucket with public URLs."""
    view = DriveView(bucket, access_token=session.access_token)
    await view.refresh()
    return _respond(view, response)


@router.post("/upload", response_model=DriveResponse, response_model_exclude_none=True)
async def upload_file(
    response: Response,
    files: list[UploadFile] = File(...),
    session: CurrentSession = Depends(require_session),
    bucket: StorageBucket = Depends(get_storage_bucket),
):
    """Upload the first selected file (upsert), then return the fresh listing."""
    upload = files[0]
    data = await upload.read()

    view = DriveView(
        bucket,
        access_token=session.access_token,
        on_progress=lambda pct: logger.debug("Uploading %s: %d%%", upload.filename, pct),
    )
    key = await view.upload(upload.filename or "", data, content_type=upload.content_type)
    return _respond(view, response, ok=key is not None)


@router.delete("/files/{name}", response_model=DriveResponse, response_model_exclude_none=True)
async def delete_file(
    name: str,
    response: Response,
    session: CurrentSession = Depends(require_session),
    bucket: StorageBucket = Depends(get_storage_bucket),
):
    """Delete one object and return the remaining listing."""
    view = DriveView(bucket, access_token=session.access_token)
    deleted = await view.delete(name)

    # The listing only fills ``files``; its failure is logged, not reported.
    delete_error = view.error
    await view.refresh()
    view.error = delete_error
    return _respond(view, response, ok=deleted)
