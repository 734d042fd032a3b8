# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates a user account from the command line.

Run after the initial migration:
    python bin/create_user.py alice@example.com alice

The password is prompted for and never echoed.
"""

import argparse
import getpass
import os
import sys

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/create_user.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.security import hash_password   # noqa: E402
from database import SessionLocal         # noqa: E402
from models.user import User              # noqa: E402


def create_user(email: str, username: str, password: str) -> bool:
    """Insert the user.  Returns False if the email is already registered."""
    email = email.strip().lower()
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == email).first():
            print(f"[create_user] '{email}' already exists – skipping.")
            return False

        db.add(User(email=email, username=username, password_hash=hash_password(password)))
        db.commit()
        print(f"[create_user] '{email}' created successfully.")
        return True
    finally:
        db.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create a vault user account.")
    parser.add_argument("email")
    parser.add_argument("username")
    args = parser.parse_args(argv)

    password = getpass.getpass("Password: ")
    if not password or password != getpass.getpass("Repeat password: "):
        print("[create_user] Passwords are empty or do not match.")
        return 1
    return 0 if create_user(args.email, args.username, password) else 1


if __name__ == "__main__":
    sys.exit(main())
