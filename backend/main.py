# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Instantiate the FastAPI app.
* Register CORS middleware and the request-logging middleware.
* Mount the feature routers (auth, cards, albums, images, folders,
  documents, personal-info, files).
* Collapse unexpected exceptions into a generic 500 with no detail.
* Expose a /health endpoint for container liveness checks.

Importing this module loads ``core.config.settings``; a missing
SIGNING_SECRET therefore stops the process before it can serve a request.
"""

import time

from fastapi import FastAPI, Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from core.config import settings
from core.logger import logger
from auth.router import router as auth_router
from cards.router import router as cards_router
from albums.router import router as albums_router
from images.router import router as images_router
from folders.router import router as folders_router
from documents.router import router as documents_router
from personal_info.router import router as personal_info_router
from files.router import router as files_router

app = FastAPI(title="Personal Vault", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
    allow_credentials=True,
)


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Query strings are NOT logged – signed file URLs carry their token there.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(_RequestLogMiddleware)


# ---------------------------------------------------------------------------
# Unexpected errors
# ---------------------------------------------------------------------------


@app.exception_handler(Exception)
async def _unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(cards_router)
app.include_router(albums_router)
app.include_router(images_router)
app.include_router(folders_router)
app.include_router(documents_router)
app.include_router(personal_info_router)
app.include_router(files_router)

# ---------------------------------------------------------------------------
# Lifecycle & health check
# ---------------------------------------------------------------------------


@app.on_event("startup")
async def _on_startup():
    logger.info("Personal Vault service starting up")


@app.on_event("shutdown")
async def _on_shutdown():
    logger.info("Personal Vault service shutting down")


@app.get("/health")
def health():
    return {"status": "ok"}
