# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Application configuration.
All secrets and connection strings are loaded exclusively from environment
variables (or etc/app.conf).  Nothing sensitive is hard-coded here.

SIGNING_SECRET has no default: if it is missing, ``Settings()`` raises a
ValidationError at import time and the service refuses to start.
"""

import re
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# Project root is two levels up from this file  (backend/core/config.py → vault/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value) -> int:
    """
    Convert a lifetime such as ``"1h"``, ``"30m"``, ``"7d"`` or ``3600`` into
    seconds.  Raises ``ValueError`` for anything else.
    """
    if isinstance(value, int):
        seconds = value
    else:
        match = _DURATION_RE.match(str(value).lower())
        if not match:
            raise ValueError(f"invalid duration: {value!r}")
        seconds = int(match.group(1)) * _DURATION_UNITS[match.group(2)]
    if seconds <= 0:
        raise ValueError("duration must be positive")
    return seconds


class Settings(BaseSettings):
    # HS256 signing secret and root secret of the field cipher.
    # Must be a long, random string; never logged.
    signing_secret: str

    # Token lifetime, accepted as "1h" / "30m" / "7d" / seconds
    token_ttl: int = 3600

    # pbkdf2_sha256 rounds used for new password hashes
    password_hash_cost: int = 600_000

    # Database
    database_url: str = f"sqlite:///{_PROJECT_ROOT / 'vault.db'}"

    # Object storage – a directory acting as the single "vault" bucket
    storage_root: Path = _PROJECT_ROOT / "storage"
    public_base_url: str = "http://localhost:8000"
    signed_url_ttl: int = 60

    # Browser origins allowed by CORS (the React dev server by default)
    cors_origins: list[str] = ["http://localhost:5173"]

    # app.conf lives in etc/ – resolved relative to the project root so that
    # the file is found regardless of the working directory.
    model_config = {"env_file": str(_PROJECT_ROOT / "etc" / "app.conf")}

    @field_validator("token_ttl", mode="before")
    @classmethod
    def _parse_token_ttl(cls, value):
        return parse_duration(value)

    @field_validator("signing_secret")
    @classmethod
    def _reject_blank_secret(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("SIGNING_SECRET must not be empty")
        return value

    @field_validator("password_hash_cost")
    @classmethod
    def _positive_cost(cls, value: int) -> int:
        if value < 1:
            raise ValueError("PASSWORD_HASH_COST must be >= 1")
        return value


# Module-level singleton – import this everywhere: from core.config import settings
settings = Settings()
