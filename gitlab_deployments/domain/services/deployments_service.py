import logging
from typing import List, Literal, Optional, Tuple, Union

from gitlab_deployments.domain.entities.deployment import Deployment
from gitlab_deployments.infrastructure.gitlab.base_client import (
    APIClient,
    GitLabResponse,
    ListOptions,
    RequestOptionFunc,
    parse_id,
    path_escape,
)

logger = logging.getLogger(__name__)


class ListDeploymentsOptions(ListOptions):
    """Filters accepted by the list deployments endpoint."""

    order_by: Optional[Literal["id", "iid", "created_at", "updated_at", "ref"]] = None
    sort: Optional[Literal["asc", "desc"]] = None
    search: Optional[str] = None


class DeploymentsService:
    """Read-only access to the deployments of a project."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_deployments(
        self,
        pid: Union[int, str],
        opt: Optional[ListDeploymentsOptions] = None,
        *options: RequestOptionFunc,
    ) -> Tuple[List[Deployment], GitLabResponse]:
        """
        List the deployments of a project.

        Args:
            pid: Numeric project ID or ``namespace/project`` path
            opt: Pagination, ordering and search filters
            options: Request option functions, e.g. ``with_sudo``

        Returns:
            Tuple of deployments (possibly empty) and response metadata
        """
        project = parse_id(pid)
        path = f"projects/{path_escape(project)}/deployments"

        request = self.client.new_request("GET", path, opt, options)
        deployments, response = await self.client.do(request, List[Deployment])
        if deployments is None:
            deployments = []

        logger.info(f"✅ Fetched {len(deployments)} deployments for project {project}")
        return deployments, response
