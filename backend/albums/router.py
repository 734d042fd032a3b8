# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Album endpoints.  Deleting an album deletes the images inside it, both the
rows and the stored objects.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from core.logger import logger
from core.ownership import owned_query, owned_resource
from core.security import get_current_user
from core.storage import delete_files
from models.album import Album
from models.user import User
from albums.schemas import AlbumCreatedResponse, ContainerCreate, ContainerResponse

router = APIRouter(prefix="/albums", tags=["albums"])


@router.get("", response_model=list[ContainerResponse])
def list_albums(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return owned_query(db, Album, current_user.id).all()


@router.post("", response_model=AlbumCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_album(
    body: ContainerCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not body.name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Album name is required")

    album = Album(user_id=current_user.id, name=body.name.strip())
    db.add(album)
    db.commit()
    db.refresh(album)
    return AlbumCreatedResponse(message="Album created", album=ContainerResponse.model_validate(album))


@router.delete("/{item_id}")
def delete_album(
    album: Album = Depends(owned_resource(Album)),
    db: Session = Depends(get_db),
):
    """Ownership of the album is checked before anything inside it is touched."""
    keys = [image.file_path for image in album.images]
    album_id = album.id
    db.delete(album)
    db.commit()
    delete_files(keys)

    logger.info("Album deleted | album_id=%d images=%d", album_id, len(keys))
    return {"message": "Album deleted"}
