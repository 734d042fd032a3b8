# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Document-folder endpoints.  Deleting a folder deletes the documents inside
it, both the rows and the stored objects.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from database import get_db
from core.logger import logger
from core.ownership import owned_query, owned_resource
from core.security import get_current_user
from core.storage import delete_files
from models.document import DocumentFolder
from models.user import User
from albums.schemas import ContainerCreate, ContainerResponse

router = APIRouter(prefix="/folders", tags=["folders"])


class FolderCreatedResponse(BaseModel):
    message: str
    folder: ContainerResponse


@router.get("", response_model=list[ContainerResponse])
def list_folders(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return owned_query(db, DocumentFolder, current_user.id).all()


@router.post("", response_model=FolderCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_folder(
    body: ContainerCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not body.name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Folder name is required")

    folder = DocumentFolder(user_id=current_user.id, name=body.name.strip())
    db.add(folder)
    db.commit()
    db.refresh(folder)
    return FolderCreatedResponse(message="Folder created", folder=ContainerResponse.model_validate(folder))


@router.delete("/{item_id}")
def delete_folder(
    folder: DocumentFolder = Depends(owned_resource(DocumentFolder)),
    db: Session = Depends(get_db),
):
    keys = [document.file_path for document in folder.documents]
    folder_id = folder.id
    db.delete(folder)
    db.commit()
    delete_files(keys)

    logger.info("Folder deleted | folder_id=%d documents=%d", folder_id, len(keys))
    return {"message": "Folder deleted"}
