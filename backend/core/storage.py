# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Object storage for uploaded images, documents and personal-information
files.

Objects live in a single bucket directory (``STORAGE_ROOT/vault``) and are
addressed by a relative key such as ``"documents/1718000000000_tax.pdf"``.
The database stores only that key.

URLs handed to the browser carry a short-lived PyJWT token bound to the
object key; ``files/router.py`` refuses any request without one.
"""

import re
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import jwt as _jwt

from core.config import settings
from core.logger import logger

BUCKET_NAME = "vault"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
_TOKEN_PURPOSE = "file"


class StorageError(Exception):
    """The object store rejected an operation."""


def _bucket() -> Path:
    return (Path(settings.storage_root) / BUCKET_NAME).resolve()


def _resolve(key: str) -> Path:
    """Map an object key to a path, refusing anything outside the bucket."""
    bucket = _bucket()
    target = (bucket / key).resolve()
    if target == bucket or bucket not in target.parents:
        raise StorageError(f"invalid object key: {key!r}")
    return target


def sanitize_filename(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name or "file")


def upload_file(data: bytes, filename: str, folder: str) -> str:
    """
    Store *data* under ``<folder>/<millis>_<sanitised filename>`` and return
    that key.  Existing objects are never overwritten.
    """
    millis = int(time.time() * 1000)
    safe_name = sanitize_filename(filename)
    key = f"{folder}/{millis}_{safe_name}"
    target = _resolve(key)
    while target.exists():
        millis += 1
        key = f"{folder}/{millis}_{safe_name}"
        target = _resolve(key)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    return key


def delete_file(key: str) -> None:
    """Remove an object.  Deleting a key that is already gone is a no-op."""
    _resolve(key).unlink(missing_ok=True)


def delete_files(keys) -> None:
    """
    Best-effort removal of several objects after their rows were deleted.
    A failure on one key is logged and does not stop the others.
    """
    for key in keys:
        try:
            delete_file(key)
        except (OSError, StorageError):
            logger.warning("Could not delete stored object %s", key, exc_info=True)


def open_file(key: str) -> Path:
    target = _resolve(key)
    if not target.is_file():
        raise StorageError(f"object not found: {key!r}")
    return target


# ---------------------------------------------------------------------------
# Signed URLs
# ---------------------------------------------------------------------------


def _sign(key: str, expires_in: int, download: bool) -> str:
    now = datetime.now(timezone.utc)
    token = _jwt.encode(
        {
            "purpose": _TOKEN_PURPOSE,
            "path": key,
            "dl": download,
            "iat": now,
            "exp": now + timedelta(seconds=expires_in),
        },
        settings.signing_secret,
        algorithm="HS256",
    )
    base = settings.public_base_url.rstrip("/")
    return f"{base}/files/{quote(key)}?token={token}"


def get_view_url(key: str) -> str:
    """URL for inline viewing; lives as long as an access token."""
    return _sign(key, settings.token_ttl, download=False)


def get_signed_url(key: str, expires_in: Optional[int] = None) -> str:
    """Short-lived download URL (SIGNED_URL_TTL seconds by default)."""
    return _sign(key, expires_in or settings.signed_url_ttl, download=True)


def verify_signed_token(key: str, token: str) -> Optional[dict]:
    """
    Return the token claims if *token* was issued for *key* and has not
    expired, otherwise ``None``.
    """
    try:
        claims = _jwt.decode(
            token,
            settings.signing_secret,
            algorithms=["HS256"],
            options={"require": ["exp", "path", "purpose"]},
        )
    except _jwt.PyJWTError:
        return None
    if claims.get("purpose") != _TOKEN_PURPOSE or claims.get("path") != key:
        return None
    return claims
