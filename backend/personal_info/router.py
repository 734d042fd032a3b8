# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Personal-information endpoints – one titled file per entry (ID scans,
certificates, …).  Same ownership rules as every other resource.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from database import get_db
from core.ownership import owned_query, owned_resource
from core.security import get_current_user
from core.storage import delete_files, get_signed_url, get_view_url
from core.uploads import commit_or_discard, store_uploads
from models.personal_information import PersonalInformation
from models.user import User
from personal_info.schemas import PersonalInfoMutationResponse, PersonalInfoResponse

router = APIRouter(prefix="/personal-info", tags=["personal-info"])

_FOLDER = "personal-info"


def _to_response(info: PersonalInformation) -> PersonalInfoResponse:
    return PersonalInfoResponse.model_validate(info).model_copy(
        update={"file_path": get_view_url(info.file_path)}
    )


@router.get("", response_model=list[PersonalInfoResponse])
def list_personal_info(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [_to_response(info) for info in owned_query(db, PersonalInformation, current_user.id).all()]


@router.post("", response_model=PersonalInfoMutationResponse, status_code=status.HTTP_201_CREATED)
async def add_personal_info(
    title: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not title or not title.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")
    if not file or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File is required")

    [(_, key)] = await store_uploads([file], _FOLDER)
    info = PersonalInformation(user_id=current_user.id, title=title.strip(), file_path=key)
    db.add(info)
    commit_or_discard(db, [key])
    db.refresh(info)
    return PersonalInfoMutationResponse(message="Information added", document=_to_response(info))


@router.put("/{item_id}", response_model=PersonalInfoMutationResponse)
async def update_personal_info(
    title: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    info: PersonalInformation = Depends(owned_resource(PersonalInformation)),
    db: Session = Depends(get_db),
):
    has_title = bool(title and title.strip())
    has_file = bool(file and file.filename)
    if not has_title and not has_file:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No data to update")

    old_key = None
    new_keys: list[str] = []
    if has_title:
        info.title = title.strip()
    if has_file:
        new_keys = [key for _, key in await store_uploads([file], _FOLDER)]
        old_key, info.file_path = info.file_path, new_keys[0]

    commit_or_discard(db, new_keys)
    db.refresh(info)
    if old_key:
        delete_files([old_key])
    return PersonalInfoMutationResponse(message="Information updated", document=_to_response(info))


@router.delete("/{item_id}")
def delete_personal_info(
    info: PersonalInformation = Depends(owned_resource(PersonalInformation)),
    db: Session = Depends(get_db),
):
    key = info.file_path
    db.delete(info)
    db.commit()
    delete_files([key])
    return {"message": "Information deleted"}


@router.get("/{item_id}/download")
def download_personal_info(info: PersonalInformation = Depends(owned_resource(PersonalInformation))):
    return RedirectResponse(get_signed_url(info.file_path))
