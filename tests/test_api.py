import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from gitlab_deployments.config import settings
from gitlab_deployments.dependencies import get_deployments_service
from gitlab_deployments.domain.services.deployments_service import DeploymentsService
from gitlab_deployments.infrastructure.gitlab.base_client import GitLabClient
from gitlab_deployments.main import create_app


@pytest.fixture
def api(gitlab, base_url):
    app = create_app()

    async def override_service():
        async with GitLabClient(base_url=base_url, token="secret-token", transport=gitlab.transport) as client:
            yield DeploymentsService(client)

    app.dependency_overrides[get_deployments_service] = override_service
    with TestClient(app) as client:
        yield client


def test_health(api):
    response = api.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_lists_deployments_by_path(api, gitlab, deployment_payload):
    gitlab.respond_with(200, [deployment_payload], headers={"X-Total": "1", "X-Total-Pages": "1"})

    response = api.get("/api/v1/projects/my-group/my-project/deployments", params={"search": "prod"})

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 1
    assert body[0]["id"] == 1
    assert body[0]["environment"]["name"] == "production"
    assert response.headers["X-Total"] == "1"
    assert response.headers["X-Total-Pages"] == "1"

    sent = gitlab.requests[0]
    assert sent.url.raw_path == b"/api/v4/projects/my-group%2Fmy-project/deployments?search=prod"


def test_numeric_project_id(api, gitlab):
    response = api.get("/api/v1/projects/42/deployments", params={"order_by": "id", "sort": "asc"})

    assert response.status_code == 200
    assert response.json() == []
    assert gitlab.requests[0].url.path == "/api/v4/projects/42/deployments"
    assert dict(gitlab.requests[0].url.params) == {"order_by": "id", "sort": "asc"}


def test_invalid_query_is_rejected_before_calling_gitlab(api, gitlab):
    response = api.get("/api/v1/projects/42/deployments", params={"sort": "sideways"})

    assert response.status_code == 422
    assert gitlab.requests == []


def test_blank_project_is_a_bad_request(api, gitlab):
    response = api.get("/api/v1/projects/%20/deployments")

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_IDENTIFIER"
    assert gitlab.requests == []


def test_gitlab_status_is_forwarded(api, gitlab):
    gitlab.respond_with(404, {"message": "404 Project Not Found"})

    response = api.get("/api/v1/projects/999/deployments")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "404 Project Not Found"
    assert body["error_code"] == "GITLAB_HTTP_404"


def test_unreachable_gitlab_is_a_bad_gateway(api, gitlab):
    gitlab.fail_with(httpx.ConnectError("connection refused"))

    response = api.get("/api/v1/projects/42/deployments")

    assert response.status_code == 502
    assert response.json()["error_code"] == "GITLAB_UNREACHABLE"


def test_garbage_from_gitlab_is_a_bad_gateway(api, gitlab):
    gitlab.respond_with(200, content=b"<html>maintenance</html>")

    response = api.get("/api/v1/projects/42/deployments")

    assert response.status_code == 502
    assert response.json()["error_code"] == "GITLAB_BAD_RESPONSE"


def test_non_ascii_digits_are_a_path(api, gitlab):
    response = api.get("/api/v1/projects/%C2%B2/deployments")

    assert response.status_code == 200
    assert gitlab.requests[0].url.raw_path == b"/api/v4/projects/%C2%B2/deployments"


def test_detailed_request_logging_follows_settings(gitlab, base_url, monkeypatch, caplog):
    monkeypatch.setattr(settings, "LOG_REQUEST_DETAILS", True)
    app = create_app()

    async def override_service():
        async with GitLabClient(base_url=base_url, transport=gitlab.transport) as client:
            yield DeploymentsService(client)

    app.dependency_overrides[get_deployments_service] = override_service
    caplog.set_level(logging.DEBUG, logger="gitlab_deployments.middleware.logging")
    with TestClient(app) as client:
        client.get("/api/v1/projects/42/deployments", params={"search": "prod"})

    assert "Query params: {'search': 'prod'}" in caplog.text


def test_detailed_request_logging_is_off_by_default(api, caplog):
    caplog.set_level(logging.DEBUG, logger="gitlab_deployments.middleware.logging")

    api.get("/api/v1/projects/42/deployments", params={"search": "prod"})

    assert "Query params" not in caplog.text
