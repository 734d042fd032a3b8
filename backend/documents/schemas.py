# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for documents and personal information."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class BatchDeleteRequest(BaseModel):
    ids: list[int] = []


class DocumentResponse(BaseModel):
    id: int
    user_id: int
    folder_id: Optional[int]
    title: str
    file_path: str  # signed view URL, not the object key
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DocumentsCreatedResponse(BaseModel):
    message: str
    documents: list[DocumentResponse]


class DocumentMutationResponse(BaseModel):
    message: str
    document: DocumentResponse
