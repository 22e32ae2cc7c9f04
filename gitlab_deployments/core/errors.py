"""
Error taxonomy for GitLab API calls.

Every failure a caller can see is one of the ``GitLabError`` subclasses below.
Nothing here is retried: errors are raised once and travel up untouched.
"""

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from gitlab_deployments.infrastructure.gitlab.base_client import GitLabResponse


class GitLabError(Exception):
    """Base class for all errors raised by the GitLab client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidIdentifier(GitLabError):
    """The project reference could not be turned into a path segment."""


class TransportError(GitLabError):
    """The request never produced an HTTP response (DNS, connect, timeout...)."""


class HTTPStatusError(GitLabError):
    """GitLab answered with a non-2xx status code."""

    def __init__(
        self,
        status_code: int,
        message: str,
        payload: Any = None,
        response: Optional["GitLabResponse"] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload
        self.response = response

    def __str__(self) -> str:
        return f"{self.status_code} {self.message}"


class DecodeError(GitLabError):
    """The response body was not JSON or did not have the expected shape."""

    def __init__(self, message: str, response: Optional["GitLabResponse"] = None):
        super().__init__(message)
        self.response = response
