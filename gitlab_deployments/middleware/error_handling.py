"""
Error handlers translating GitLab client errors into JSON responses.

InvalidIdentifier maps to 400, GitLab status errors keep their status code,
transport and decoding failures become 502 Bad Gateway.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from gitlab_deployments.core.errors import (
    DecodeError,
    GitLabError,
    HTTPStatusError,
    InvalidIdentifier,
    TransportError,
)
from gitlab_deployments.schemas.responses import ErrorResponse

logger = logging.getLogger(__name__)


def _status_for(exc: GitLabError) -> int:
    if isinstance(exc, InvalidIdentifier):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, HTTPStatusError):
        return exc.status_code
    return status.HTTP_502_BAD_GATEWAY


def _error_code(exc: GitLabError) -> str:
    if isinstance(exc, InvalidIdentifier):
        return "INVALID_IDENTIFIER"
    if isinstance(exc, HTTPStatusError):
        return f"GITLAB_HTTP_{exc.status_code}"
    if isinstance(exc, TransportError):
        return "GITLAB_UNREACHABLE"
    if isinstance(exc, DecodeError):
        return "GITLAB_BAD_RESPONSE"
    return "GITLAB_ERROR"


async def handle_gitlab_error(request: Request, exc: GitLabError) -> JSONResponse:
    status_code = _status_for(exc)
    logger.warning(
        f"🚨 {type(exc).__name__} for {request.method} {request.url.path}: {exc.message}"
    )

    error_response = ErrorResponse(
        error=exc.message,
        error_code=_error_code(exc),
        details={
            "path": str(request.url.path),
            "method": request.method,
            "status_code": status_code,
        },
    )
    return JSONResponse(status_code=status_code, content=error_response.model_dump(mode="json"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GitLabError, handle_gitlab_error)
