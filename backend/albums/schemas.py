# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models shared by albums and document folders."""

from datetime import datetime

from pydantic import BaseModel


class ContainerCreate(BaseModel):
    name: str = ""


class ContainerResponse(BaseModel):
    id: int
    user_id: int
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AlbumCreatedResponse(BaseModel):
    message: str
    album: ContainerResponse
