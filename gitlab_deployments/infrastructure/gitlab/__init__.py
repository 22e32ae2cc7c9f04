"""
GitLab API infrastructure.

Shared request building, transport and error normalization used by the
resource services.
"""

from .base_client import (
    APIClient,
    GitLabClient,
    GitLabResponse,
    ListOptions,
    RequestOptionFunc,
    parse_id,
    path_escape,
    with_header,
    with_sudo,
)

__all__ = [
    "APIClient",
    "GitLabClient",
    "GitLabResponse",
    "ListOptions",
    "RequestOptionFunc",
    "parse_id",
    "path_escape",
    "with_header",
    "with_sudo",
]
