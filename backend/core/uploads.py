# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Multipart upload plumbing shared by the image, document and
personal-information routers.
"""

from typing import Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.logger import logger
from core.storage import StorageError, delete_files, upload_file

MAX_FILES_PER_UPLOAD = 50


def parse_optional_id(raw: Optional[str], field: str) -> Optional[int]:
    """Form fields arrive as text; ``""`` means "not given"."""
    if raw is None or not raw.strip():
        return None
    if not raw.strip().isdigit():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field} must be an integer")
    return int(raw)


def check_batch(
    files: Optional[list[UploadFile]],
    container_id: Optional[int],
    title: Optional[str],
    noun: str,
    container: str,
) -> list[UploadFile]:
    """
    Outside a container exactly one file and a title are required; inside
    one, any number up to MAX_FILES_PER_UPLOAD and the title is optional.
    """
    files = [f for f in files or [] if f.filename]
    if not files:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files uploaded")
    if len(files) > MAX_FILES_PER_UPLOAD:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {MAX_FILES_PER_UPLOAD} files per upload",
        )
    if container_id is None:
        if len(files) > 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"You can only upload one {noun} at a time outside {container}",
            )
        if not title or not title.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{noun.capitalize()} title is required for uploads outside {container}",
            )
    return files


async def store_uploads(files: list[UploadFile], folder: str) -> list[tuple[str, str]]:
    """
    Write every upload to the bucket.  Returns ``(original name, key)``
    pairs.  If one write fails, the ones already written are removed.
    """
    stored: list[tuple[str, str]] = []
    try:
        for upload in files:
            data = await upload.read()
            stored.append((upload.filename, upload_file(data, upload.filename, folder)))
    except (OSError, StorageError):
        logger.exception("Storing uploads failed | folder=%s", folder)
        delete_files(key for _, key in stored)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store uploaded files",
        )
    return stored


def commit_or_discard(db: Session, keys: list[str]) -> None:
    """Commit; on failure roll back and drop the objects written for it."""
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database write failed, discarding %d stored object(s)", len(keys))
        delete_files(keys)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save uploaded files",
        )
