# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Document endpoints – upload (optionally into a folder), list, update,
download via signed URL, single and batch delete.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from database import get_db
from core.logger import logger
from core.ownership import get_owned_or_404, owned_query, owned_resource
from core.security import get_current_user
from core.storage import delete_files, get_signed_url, get_view_url
from core.uploads import check_batch, commit_or_discard, parse_optional_id, store_uploads
from models.document import Document, DocumentFolder
from models.user import User
from documents.schemas import (
    BatchDeleteRequest,
    DocumentMutationResponse,
    DocumentResponse,
    DocumentsCreatedResponse,
)

router = APIRouter(prefix="/documents", tags=["documents"])


def _to_response(document: Document) -> DocumentResponse:
    return DocumentResponse.model_validate(document).model_copy(
        update={"file_path": get_view_url(document.file_path)}
    )


# ---------------------------------------------------------------------------
# POST /documents
# ---------------------------------------------------------------------------


@router.post("", response_model=DocumentsCreatedResponse, status_code=status.HTTP_201_CREATED)
async def add_documents(
    files: Optional[list[UploadFile]] = File(None),
    title: Optional[str] = Form(None),
    folder_id: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    container_id = parse_optional_id(folder_id, "folder_id")
    files = check_batch(files, container_id, title, "document", "a folder")
    if container_id is not None:
        get_owned_or_404(db, DocumentFolder, container_id, current_user.id)

    stored = await store_uploads(files, "documents")
    documents = [
        Document(
            user_id=current_user.id,
            folder_id=container_id,
            title=(title or "").strip() or filename,
            file_path=key,
        )
        for filename, key in stored
    ]
    db.add_all(documents)
    commit_or_discard(db, [key for _, key in stored])
    for document in documents:
        db.refresh(document)

    logger.info("Documents added | user_id=%d count=%d", current_user.id, len(documents))
    return DocumentsCreatedResponse(
        message="Documents added successfully",
        documents=[_to_response(document) for document in documents],
    )


# ---------------------------------------------------------------------------
# GET /documents
# ---------------------------------------------------------------------------


@router.get("", response_model=list[DocumentResponse])
def list_documents(
    folder_id: Optional[int] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = owned_query(db, Document, current_user.id)
    if folder_id is not None:
        query = query.filter(Document.folder_id == folder_id)
    return [_to_response(document) for document in query.all()]


# ---------------------------------------------------------------------------
# POST /documents/delete-batch
# ---------------------------------------------------------------------------


@router.post("/delete-batch")
def batch_delete_documents(
    body: BatchDeleteRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Delete the caller's documents among ``ids``.  Ids that are unknown or
    belong to someone else are skipped silently.
    """
    if not body.ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or empty IDs list")

    documents = (
        db.query(Document)
        .filter(Document.id.in_(body.ids), Document.user_id == current_user.id)
        .all()
    )
    keys = [document.file_path for document in documents]
    for document in documents:
        db.delete(document)
    db.commit()
    delete_files(keys)

    logger.info("Documents batch-deleted | user_id=%d count=%d", current_user.id, len(keys))
    return {"message": "Documents deleted successfully", "deleted": len(keys)}


# ---------------------------------------------------------------------------
# GET /documents/{id}/download
# ---------------------------------------------------------------------------


@router.get("/{item_id}/download")
def download_document(document: Document = Depends(owned_resource(Document))):
    return RedirectResponse(get_signed_url(document.file_path))


# ---------------------------------------------------------------------------
# PUT /documents/{id}
# ---------------------------------------------------------------------------


@router.put("/{item_id}", response_model=DocumentMutationResponse)
async def update_document(
    title: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    document: Document = Depends(owned_resource(Document)),
    db: Session = Depends(get_db),
):
    """Rename and/or replace the file.  The old object is removed afterwards."""
    has_title = bool(title and title.strip())
    has_file = bool(file and file.filename)
    if not has_title and not has_file:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No data to update")

    old_key = None
    new_keys: list[str] = []
    if has_title:
        document.title = title.strip()
    if has_file:
        new_keys = [key for _, key in await store_uploads([file], "documents")]
        old_key, document.file_path = document.file_path, new_keys[0]

    commit_or_discard(db, new_keys)
    db.refresh(document)
    if old_key:
        delete_files([old_key])

    return DocumentMutationResponse(message="Document updated successfully", document=_to_response(document))


# ---------------------------------------------------------------------------
# DELETE /documents/{id}
# ---------------------------------------------------------------------------


@router.delete("/{item_id}")
def delete_document(
    document: Document = Depends(owned_resource(Document)),
    db: Session = Depends(get_db),
):
    key = document.file_path
    db.delete(document)
    db.commit()
    delete_files([key])
    return {"message": "Document deleted successfully"}
