# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic response models for the image endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ImageResponse(BaseModel):
    id: int
    user_id: int
    album_id: Optional[int]
    title: str
    file_path: str  # signed view URL, not the object key
    created_at: datetime

    model_config = {"from_attributes": True}


class ImagesCreatedResponse(BaseModel):
    message: str
    images: list[ImageResponse]
