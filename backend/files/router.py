# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Serves stored objects to the browser.

No bearer token here: the ``token`` query parameter produced by
``core.storage`` is the credential, and it is bound to a single object key.
Any failure – missing, expired, wrong key, unknown object – is a 404.
"""

from pathlib import PurePosixPath

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from core.storage import StorageError, open_file, verify_signed_token

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/{key:path}")
def get_file(key: str, token: str = ""):
    claims = verify_signed_token(key, token) if token else None
    if claims is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    try:
        path = open_file(key)
    except StorageError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    if claims.get("dl"):
        # strip the "<millis>_" prefix for the suggested download name
        filename = PurePosixPath(key).name.partition("_")[2] or PurePosixPath(key).name
        return FileResponse(path, filename=filename)
    return FileResponse(path)
