# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Auth endpoints – registration, login, profile read / update.

Security notes
--------------
* Login returns the *same* error message whether the email doesn't exist or
  the password is wrong.  This prevents user-enumeration attacks.
* Registration and login both answer with a freshly signed bearer token.
* The profile update path can never touch email or password.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from core.logger import logger
from core.security import (
    verify_password,
    hash_password,
    create_access_token,
    get_current_user,
)
from models.user import User
from auth.schemas import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdateRequest,
    AuthResponse,
    UserRef,
    ProfileResponse,
    ProfileUpdateResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])

# Generic message used for both "no such email" and "wrong password"
_LOGIN_FAIL = "Invalid email or password"
_DUPLICATE = "User already exists"


def _normalise_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# POST /auth/register
# ---------------------------------------------------------------------------


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and return a signed JWT for it."""
    email = _normalise_email(body.email)
    if not email or not body.username.strip() or not body.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email, username, and password are required",
        )

    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_DUPLICATE)

    user = User(
        email=email,
        username=body.username.strip(),
        password_hash=hash_password(body.password),
        phone_number=body.phone_number or None,
        dob=body.dob,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_DUPLICATE)
    db.refresh(user)

    logger.info("User registered | user_id=%d", user.id)
    return AuthResponse(
        message="User registered successfully",
        user=UserRef.model_validate(user),
        token=create_access_token(user.id, user.email),
    )


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate and return a signed JWT."""
    if not body.email or not body.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    user = db.query(User).filter(User.email == _normalise_email(body.email)).first()

    # Unified failure path – no information leaks about whether the email exists
    if not user or not verify_password(body.password, user.password_hash):
        logger.info("Login failed")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_LOGIN_FAIL)

    logger.info("Login succeeded | user_id=%d", user.id)
    return AuthResponse(
        message="Login successful",
        user=UserRef.model_validate(user),
        token=create_access_token(user.id, user.email),
    )


# ---------------------------------------------------------------------------
# GET /auth/me
# ---------------------------------------------------------------------------


@router.get("/me", response_model=ProfileResponse)
def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile (no password hash)."""
    return current_user


# ---------------------------------------------------------------------------
# PUT /auth/me
# ---------------------------------------------------------------------------


@router.put("/me", response_model=ProfileUpdateResponse)
def update_me(
    body: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update of the profile.  Only provided fields change."""
    if body.username is not None:
        if not body.username.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username cannot be empty",
            )
        current_user.username = body.username.strip()
    if body.phone_number is not None:
        current_user.phone_number = body.phone_number or None
    if body.dob is not None:
        current_user.dob = body.dob
    if body.profile_picture is not None:
        current_user.profile_picture = body.profile_picture or None

    db.commit()
    db.refresh(current_user)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=ProfileResponse.model_validate(current_user),
    )
