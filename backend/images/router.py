# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Image endpoints – upload (optionally into an album), list, delete.

Uploading into an album requires owning that album; the ``album_id`` list
filter narrows the caller's own images and never widens the query.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from database import get_db
from core.logger import logger
from core.ownership import get_owned_or_404, owned_query, owned_resource
from core.security import get_current_user
from core.storage import delete_files, get_view_url
from core.uploads import check_batch, commit_or_discard, parse_optional_id, store_uploads
from models.album import Album, Image
from models.user import User
from images.schemas import ImageResponse, ImagesCreatedResponse

router = APIRouter(prefix="/images", tags=["images"])


def _to_response(image: Image) -> ImageResponse:
    return ImageResponse.model_validate(image).model_copy(
        update={"file_path": get_view_url(image.file_path)}
    )


@router.post("", response_model=ImagesCreatedResponse, status_code=status.HTTP_201_CREATED)
async def add_images(
    files: Optional[list[UploadFile]] = File(None),
    title: Optional[str] = Form(None),
    album_id: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Outside an album: exactly one file and a title.  Inside an album: up to
    50 files, each titled with *title* or its own file name.
    """
    container_id = parse_optional_id(album_id, "album_id")
    files = check_batch(files, container_id, title, "image", "an album")
    if container_id is not None:
        get_owned_or_404(db, Album, container_id, current_user.id)

    stored = await store_uploads(files, "images")
    images = [
        Image(
            user_id=current_user.id,
            album_id=container_id,
            title=(title or "").strip() or filename,
            file_path=key,
        )
        for filename, key in stored
    ]
    db.add_all(images)
    commit_or_discard(db, [key for _, key in stored])
    for image in images:
        db.refresh(image)

    logger.info("Images added | user_id=%d count=%d", current_user.id, len(images))
    return ImagesCreatedResponse(
        message="Images added successfully",
        images=[_to_response(image) for image in images],
    )


@router.get("", response_model=list[ImageResponse])
def list_images(
    album_id: Optional[int] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = owned_query(db, Image, current_user.id)
    if album_id is not None:
        query = query.filter(Image.album_id == album_id)
    return [_to_response(image) for image in query.all()]


@router.delete("/{item_id}")
def delete_image(
    image: Image = Depends(owned_resource(Image)),
    db: Session = Depends(get_db),
):
    key = image.file_path
    db.delete(image)
    db.commit()
    delete_files([key])
    return {"message": "Image deleted successfully"}
