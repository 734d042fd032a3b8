# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the auth endpoints."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


# -- Requests --------------------------------------------------------------


class RegisterRequest(BaseModel):
    email: str
    username: str
    password: str
    phone_number: Optional[str] = None
    dob: Optional[date] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdateRequest(BaseModel):
    # email and password are deliberately absent: they cannot change here
    username: Optional[str] = None
    phone_number: Optional[str] = None
    dob: Optional[date] = None
    profile_picture: Optional[str] = None


# -- Responses -------------------------------------------------------------


class UserRef(BaseModel):
    id: int
    email: str

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    message: str
    user: UserRef
    token: str


class ProfileResponse(BaseModel):
    id: int
    email: str
    username: str
    phone_number: Optional[str]
    dob: Optional[date]
    profile_picture: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdateResponse(BaseModel):
    message: str
    user: ProfileResponse
