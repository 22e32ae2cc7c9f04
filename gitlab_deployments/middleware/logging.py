"""
Request/response logging middleware.

Logs every incoming request and outgoing response with timing information.
"""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

SKIP_PATHS = {"/health", "/favicon.ico"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    def __init__(self, app, enable_detailed_logging: bool = False):
        super().__init__(app)
        self.enable_detailed_logging = enable_detailed_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        quiet = request.url.path in SKIP_PATHS

        if not quiet:
            client_ip = request.client.host if request.client else None
            logger.info(f"📥 {request.method} {request.url.path} - {client_ip}")
            if self.enable_detailed_logging:
                logger.debug(f"📋 Query params: {dict(request.query_params)}")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"💥 {request.method} {request.url.path} - ERROR - {process_time:.3f}s - {str(e)}"
            )
            raise

        process_time = time.time() - start_time
        if not quiet:
            logger.info(
                f"📤 {request.method} {request.url.path} - {response.status_code} - "
                f"{process_time:.3f}s"
            )

        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response
