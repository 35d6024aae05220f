"""API middleware for authentication and logging."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from pedi_eval.reference.tables import REFERENCE_TABLES_VERSION

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({"/health", "/health/live", "/api-info", "/docs", "/openapi.json"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request and stamp responses with the reference-table version."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        client = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} status={response.status_code} "
            f"duration={duration:.3f}s client={client} tables={REFERENCE_TABLES_VERSION}",
        )

        response.headers["X-Process-Time"] = f"{duration:.3f}"
        response.headers["X-Reference-Tables-Version"] = REFERENCE_TABLES_VERSION
        return response


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Require an API key on everything except health and docs."""

    def __init__(self, app, api_key: str):
        super().__init__(app)
        self.api_key = api_key

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in PUBLIC_PATHS:
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        api_key_header = request.headers.get("X-API-Key")

        provided_key = None
        if auth_header and auth_header.startswith("Bearer "):
            provided_key = auth_header[7:]
        elif api_key_header:
            provided_key = api_key_header

        if not provided_key or provided_key != self.api_key:
            logger.warning(
                f"Unauthorized request: {request.method} {request.url.path} "
                f"client={request.client.host if request.client else 'unknown'}"
            )
            return Response(
                content='{"error": "Unauthorized", "detail": "Invalid or missing API key"}',
                status_code=401,
                media_type="application/json",
            )

        return await call_next(request)
