# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives and auth guards live
here.  No other module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (passlib pbkdf2_sha256)
2. Card-field encryption / decryption       (AES-256-CBC + HMAC-SHA256)
3. JWT creation / decoding                  (PyJWT / HS256)
4. FastAPI dependency guard                 (get_current_user)
"""

import re
import secrets
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt as _jwt        # PyJWT
from passlib.hash import pbkdf2_sha256 as _pbkdf2  # pure Python, no binary deps
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from core.config import settings
from database import get_db
from models.user import User

# ---------------------------------------------------------------------------
# 1.  pbkdf2_sha256 – password hashing
# ---------------------------------------------------------------------------
# The round count is PASSWORD_HASH_COST.  passlib embeds salt and rounds in
# the hash string, so older hashes keep verifying after the cost changes.
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """
    Hash a plaintext password with PBKDF2-SHA256.

    Returns the full passlib hash string, e.g. ``"$pbkdf2-sha256$..."``.
    A fresh random salt is drawn on every call.
    """
    return _pbkdf2.using(rounds=settings.password_hash_cost).hash(plain)


def verify_password(plain: str, stored_hash: str) -> bool:
    """
    Constant-time verification of *plain* against a hash produced by
    :func:`hash_password`.  A malformed or empty stored hash verifies as
    ``False`` rather than raising.
    """
    try:
        return _pbkdf2.verify(plain, stored_hash)
    except (ValueError, TypeError):
        return False


# ---------------------------------------------------------------------------
# 2.  Field cipher – card number / CVV at rest
# ---------------------------------------------------------------------------
# Stored text shape:   <hex iv>:<hex ciphertext || hmac tag>
#
# * iv   – 16 random bytes, new on every call
# * body – AES-256-CBC / PKCS7 ciphertext followed by a 32-byte
#          HMAC-SHA256 tag over iv || ciphertext
#
# Both subkeys come from SIGNING_SECRET: scrypt with a fixed salt gives a
# root key, HKDF splits it by label.  The signing secret itself is never
# used as cipher key material.
# ---------------------------------------------------------------------------

_KDF_SALT = b"vault-field-cipher"
_ENC_LABEL = b"vault field encryption v1"
_MAC_LABEL = b"vault field authentication v1"

_IV_LEN = 16
_BLOCK_LEN = 16
_TAG_LEN = 32

_HEX_RE = re.compile(r"[0-9a-f]+")

DECRYPTION_FAILED = "Decryption failed"


class DecryptionError(ValueError):
    """A stored field record could not be authenticated or decrypted."""


@lru_cache(maxsize=1)
def _field_keys() -> tuple[bytes, bytes]:
    """
    Derive ``(encryption_key, mac_key)`` once per process.  Both keys are
    read-only afterwards and safe to share between requests.
    """
    root = Scrypt(salt=_KDF_SALT, length=32, n=2**14, r=8, p=1).derive(
        settings.signing_secret.encode("utf-8")
    )

    def _expand(label: bytes) -> bytes:
        return HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=label).derive(root)

    return _expand(_ENC_LABEL), _expand(_MAC_LABEL)


def _tag(mac_key: bytes, data: bytes) -> hmac.HMAC:
    h = hmac.HMAC(mac_key, hashes.SHA256())
    h.update(data)
    return h


def encrypt_field(plaintext: str) -> str:
    """
    Encrypt *plaintext* for storage in an ordinary text column.

    Encrypting the same value twice gives two different records because the
    IV is regenerated on every call.
    """
    enc_key, mac_key = _field_keys()
    iv = secrets.token_bytes(_IV_LEN)

    padder = padding.PKCS7(_BLOCK_LEN * 8).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    tag = _tag(mac_key, iv + ciphertext).finalize()
    return f"{iv.hex()}:{(ciphertext + tag).hex()}"


def decrypt_field(record: str) -> str:
    """
    Reverse :func:`encrypt_field`.

    Raises :class:`DecryptionError` for every kind of bad input: missing or
    extra separator, non-hex or odd-length hex, wrong lengths, tag mismatch,
    bad padding, invalid UTF-8.  No other exception escapes.
    """
    if not isinstance(record, str):
        raise DecryptionError(DECRYPTION_FAILED)

    iv_hex, sep, body_hex = record.partition(":")
    if not sep or not _HEX_RE.fullmatch(iv_hex) or not _HEX_RE.fullmatch(body_hex):
        raise DecryptionError(DECRYPTION_FAILED)

    try:
        iv = bytes.fromhex(iv_hex)
        body = bytes.fromhex(body_hex)
    except ValueError as exc:
        raise DecryptionError(DECRYPTION_FAILED) from exc

    if len(iv) != _IV_LEN or len(body) < _BLOCK_LEN + _TAG_LEN:
        raise DecryptionError(DECRYPTION_FAILED)
    ciphertext, tag = body[:-_TAG_LEN], body[-_TAG_LEN:]
    if len(ciphertext) % _BLOCK_LEN:
        raise DecryptionError(DECRYPTION_FAILED)

    enc_key, mac_key = _field_keys()
    try:
        _tag(mac_key, iv + ciphertext).verify(tag)
    except InvalidSignature as exc:
        raise DecryptionError(DECRYPTION_FAILED) from exc

    decryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    try:
        unpadder = padding.PKCS7(_BLOCK_LEN * 8).unpadder()
        plain_bytes = unpadder.update(padded) + unpadder.finalize()
        return plain_bytes.decode("utf-8")
    except ValueError as exc:  # bad padding, or UnicodeDecodeError
        raise DecryptionError(DECRYPTION_FAILED) from exc


def mask_card_number(number: str) -> str:
    """``"4111111111111111"`` → ``"**** **** **** 1111"``."""
    return f"**** **** **** {number[-4:]}"


# ---------------------------------------------------------------------------
# 3.  JWT – access tokens
# ---------------------------------------------------------------------------
# Stateless: a token is valid until ``exp`` and cannot be revoked earlier.


class TokenError(Exception):
    """Token present but not trustworthy (bad signature, expired, malformed)."""


def create_access_token(
    user_id: int,
    email: str,
    issued_at: Optional[datetime] = None,
    ttl: Optional[timedelta] = None,
) -> str:
    """
    Sign a JWT with HS256.

    Claims: ``sub`` (email), ``user_id``, ``email``, ``iat`` and
    ``exp = iat + TOKEN_TTL``.
    """
    issued_at = issued_at or datetime.now(timezone.utc)
    lifetime = ttl or timedelta(seconds=settings.token_ttl)
    to_encode = {
        "sub": email,
        "user_id": user_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return _jwt.encode(to_encode, settings.signing_secret, algorithm="HS256")


def decode_access_token(token: str) -> dict:
    """
    Verify signature and expiry and return ``{"user_id": ..., "email": ...}``.

    Raises :class:`TokenError` on any failure; the PyJWT error is chained
    but never shown to clients.
    """
    try:
        payload = _jwt.decode(
            token,
            settings.signing_secret,
            algorithms=["HS256"],
            options={"require": ["exp", "iat", "user_id", "email"]},
        )
    except _jwt.PyJWTError as exc:
        raise TokenError("Invalid or expired token") from exc
    return {"user_id": payload["user_id"], "email": payload["email"]}


# ---------------------------------------------------------------------------
# 4.  FastAPI dependency guard
# ---------------------------------------------------------------------------

# auto_error=False so that a missing header can be told apart (401) from a
# token that fails verification (403).  tokenUrl only feeds the OpenAPI docs.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency: verify the bearer token and load the owning User row.

    * no token                        → 401 Not authenticated
    * bad / expired token, user gone  → 403 Invalid or expired token
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_access_token(token)
    except TokenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )

    user = db.get(User, claims["user_id"])
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )
    return user
