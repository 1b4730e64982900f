"""
Request logging middleware.

Provides:
- A request id per request, bound into structlog contextvars so every log
  line emitted while handling the request carries it
- One request_completed line per request with status and timing
- X-Request-ID response header for correlation
"""

from __future__ import annotations

import re
import time
import uuid

import structlog
from fastapi import FastAPI, Request

from shared.logging import get_logger

log = get_logger("storefront.request")


_TOKEN_PATH_RE = re.compile(r"(/(?:confirm-email|resetpassword)/)[^/]+")


def generate_request_id() -> str:
    """Generate a unique request ID for correlation."""
    return f"req_{uuid.uuid4().hex[:12]}"


def redact_path(path: str) -> str:
    """Mask plaintext tokens carried in confirmation and reset URLs."""
    return _TOKEN_PATH_RE.sub(r"\1***", path)


def register_request_logging(app: FastAPI) -> None:
    """Attach the request logging middleware to *app*."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = generate_request_id()
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=redact_path(request.url.path),
        )
        start = time.perf_counter()

        response = await call_next(request)

        duration_ms = int((time.perf_counter() - start) * 1000)
        status_code = response.status_code
        if status_code >= 500:
            log_fn = log.error
        elif status_code >= 400:
            log_fn = log.warning
        else:
            log_fn = log.info
        log_fn("request_completed", status_code=status_code, duration_ms=duration_ms)

        response.headers["X-Request-ID"] = request_id
        return response
