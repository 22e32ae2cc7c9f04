"""
Shared fixtures: a GitLab client wired to an in-memory transport.

Every request the code under test sends is recorded on ``gitlab.requests``;
the response comes from ``gitlab.respond_with``.
"""
import copy
from typing import Any, Callable, List, Optional

import httpx
import pytest

from gitlab_deployments.domain.services.deployments_service import DeploymentsService
from gitlab_deployments.infrastructure.gitlab.base_client import GitLabClient

BASE_URL = "https://gitlab.example.com/api/v4/"

DEPLOYMENT = {
    "id": 1,
    "iid": 1,
    "ref": "main",
    "sha": "abc123",
    "environment": {"id": 5, "name": "production", "external_url": "https://example.com"},
    "deployable": {
        "id": 10,
        "status": "success",
        "commit": {
            "id": "abc123",
            "short_id": "abc123",
            "title": "fix",
            "message": "fix",
            "author_name": "A",
            "author_email": "a@x.com",
        },
        "user": {"id": 2, "username": "a"},
    },
    "user": {"id": 2, "username": "a"},
}

FULL_DEPLOYMENT = {
    "created_at": "2016-08-11T07:36:40.222Z",
    "deployable": {
        "commit": {
            "author_email": "admin@example.com",
            "author_name": "Administrator",
            "created_at": "2016-08-11T09:36:01.000+02:00",
            "id": "99d03678b90d914dbb1b109132516d71a4a03ea8",
            "message": "Merge branch 'new-title' into 'master'\r\n\r\nUpdate README\r\n\r\n",
            "short_id": "99d03678",
            "title": "Merge branch 'new-title' into 'master'\r",
        },
        "coverage": None,
        "created_at": "2016-08-11T07:36:27.357Z",
        "finished_at": "2016-08-11T07:36:39.851Z",
        "id": 657,
        "name": "deploy",
        "ref": "master",
        "runner": None,
        "stage": "deploy",
        "started_at": None,
        "status": "success",
        "tag": False,
        "user": {
            "avatar_url": "http://www.gravatar.com/avatar/e64c7d89f26bd1972efa854d13d7dd61?s=80&d=identicon",
            "bio": None,
            "created_at": "2016-08-11T07:09:20.351Z",
            "id": 1,
            "linkedin": "",
            "location": None,
            "name": "Administrator",
            "skype": "",
            "state": "active",
            "twitter": "",
            "username": "root",
            "web_url": "http://localhost:3000/root",
            "website_url": "",
        },
    },
    "environment": {"external_url": "https://about.gitlab.com", "id": 9, "name": "production"},
    "id": 41,
    "iid": 1,
    "ref": "master",
    "sha": "99d03678b90d914dbb1b109132516d71a4a03ea8",
    "user": {
        "avatar_url": "http://www.gravatar.com/avatar/e64c7d89f26bd1972efa854d13d7dd61?s=80&d=identicon",
        "id": 1,
        "name": "Administrator",
        "state": "active",
        "username": "root",
        "web_url": "http://localhost:3000/root",
    },
}


class FakeGitLab:
    """Records requests and answers them with a configurable response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(200, json=[])

    def respond_with(
        self,
        status_code: int = 200,
        json_body: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[dict] = None,
    ) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status_code, content=content, headers=headers)
            return httpx.Response(status_code, json=json_body, headers=headers)

        self._responder = responder

    def fail_with(self, exc: Exception) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            raise exc

        self._responder = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def deployment_payload():
    return copy.deepcopy(DEPLOYMENT)


@pytest.fixture
def full_deployment_payload():
    return copy.deepcopy(FULL_DEPLOYMENT)


@pytest.fixture
def gitlab():
    return FakeGitLab()


@pytest.fixture
def gitlab_client(gitlab):
    # MockTransport holds no sockets, nothing to close
    return GitLabClient(base_url=BASE_URL, token="secret-token", transport=gitlab.transport)


@pytest.fixture
def service(gitlab_client):
    return DeploymentsService(gitlab_client)


@pytest.fixture
def base_url():
    return BASE_URL
