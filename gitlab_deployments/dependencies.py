from typing import AsyncIterator

from gitlab_deployments.domain.services.deployments_service import DeploymentsService
from gitlab_deployments.infrastructure.gitlab.base_client import GitLabClient


async def get_deployments_service() -> AsyncIterator[DeploymentsService]:
    """One GitLab client per request, closed once the response is sent."""
    async with GitLabClient() as client:
        yield DeploymentsService(client)
