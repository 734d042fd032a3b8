# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic response models for the personal-information endpoints."""

from datetime import datetime

from pydantic import BaseModel


class PersonalInfoResponse(BaseModel):
    id: int
    user_id: int
    title: str
    file_path: str  # signed view URL, not the object key
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PersonalInfoMutationResponse(BaseModel):
    message: str
    document: PersonalInfoResponse
