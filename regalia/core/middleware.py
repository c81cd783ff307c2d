"""
HTTP middleware and error handler registration
"""

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable
import logging
import time
import uuid

from .config import settings
from .exceptions import RegaliaException, regalia_exception_handler

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an id and log it with its duration

    An incoming X-Request-ID is reused so ids can be followed across
    services; otherwise a new one is generated.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"[{request_id}] {request.method} {request.url.path} crashed "
                f"after {time.perf_counter() - started:.3f}s"
            )
            raise

        elapsed = time.perf_counter() - started
        logger.info(
            f"[{request_id}] {request.method} {request.url.path}"
            f"{'?' + request.url.query if request.url.query else ''} "
            f"-> {response.status_code} in {elapsed:.3f}s"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response

def setup_middleware(app: FastAPI):
    """Configure middleware and error handlers for the application"""

    # Read-only API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(RegaliaException, regalia_exception_handler)
