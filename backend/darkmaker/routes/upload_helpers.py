"""
Upload and error helpers shared by the routes.

Keeps the route handlers focused on HTTP: content-type filtering, storing a
batch of uploads all-or-nothing, and translating the error taxonomy into
HTTPException.
"""

from typing import Iterable, List, Optional

from fastapi import HTTPException, UploadFile

from ..config import ALLOWED_MIME_PREFIXES
from ..core import get_logger, BadRequest, DarkMakerError
from ..models import ErrorResponse, FileHandle
from ..services.infrastructure.storage import Workspace

logger = get_logger(__name__, component="upload_helpers")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing input or unsupported upload"},
    413: {"model": ErrorResponse, "description": "Upload too large"},
    500: {"model": ErrorResponse, "description": "A processing stage failed"},
}


def is_present(upload: Optional[UploadFile]) -> bool:
    """Browsers submit empty file inputs as a part with no filename"""
    return upload is not None and bool(upload.filename)


def ensure_allowed_type(upload: UploadFile) -> None:
    """
    Accept only image, audio and video uploads

    Raises:
        BadRequest: For any other content type
    """
    content_type = (upload.content_type or "").lower()
    if not content_type.startswith(ALLOWED_MIME_PREFIXES):
        logger.warning("Rejected upload type", extra={
            "upload_name": upload.filename,
            "content_type": content_type,
        })
        raise BadRequest(
            f"Unsupported file type for {upload.filename}: only images, audio and video are accepted"
        )


async def store_uploads(
    workspace: Workspace,
    uploads: Iterable[UploadFile],
    prefix: str,
    max_size: int,
) -> List[FileHandle]:
    """
    Save uploads in order; on failure, remove the ones already saved

    Raises:
        UploadTooLarge, WorkspaceError: From Workspace.save_upload
    """
    saved: List[FileHandle] = []
    try:
        for upload in uploads:
            saved.append(await workspace.save_upload(upload, prefix, max_size))
    except BaseException:
        for handle in saved:
            workspace.delete_if_present(handle.path)
        raise
    return saved


def http_error(exc: Exception) -> HTTPException:
    """Map an application error to the HTTP response the caller sees"""
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, DarkMakerError):
        return HTTPException(status_code=exc.status_code, detail=str(exc))
    logger.error("Unexpected error", extra={"error": str(exc)}, exc_info=exc)
    return HTTPException(status_code=500, detail=str(exc) or type(exc).__name__)
