from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response

from gitlab_deployments.dependencies import get_deployments_service
from gitlab_deployments.domain.services.deployments_service import DeploymentsService, ListDeploymentsOptions

router = APIRouter(tags=["deployments"])

PAGINATION_HEADERS = ("X-Total", "X-Total-Pages", "X-Per-Page", "X-Page", "X-Next-Page", "X-Prev-Page")


@router.get("/projects/{project_id:path}/deployments")
async def list_deployments(
    response: Response,
    project_id: str,
    page: Optional[int] = Query(None, ge=1),
    per_page: Optional[int] = Query(None, ge=1, le=100),
    order_by: Optional[Literal["id", "iid", "created_at", "updated_at", "ref"]] = None,
    sort: Optional[Literal["asc", "desc"]] = None,
    search: Optional[str] = None,
    service: DeploymentsService = Depends(get_deployments_service),
) -> List[Dict[str, Any]]:
    """
    List deployments of a GitLab project.

    ``project_id`` is either the numeric ID or the full ``namespace/project`` path.
    GitLab pagination headers are passed through.
    """
    pid = int(project_id) if project_id.isascii() and project_id.isdigit() else project_id
    opt = ListDeploymentsOptions(page=page, per_page=per_page, order_by=order_by, sort=sort, search=search)

    deployments, meta = await service.list_deployments(pid, opt)

    for name in PAGINATION_HEADERS:
        value = meta.headers.get(name)
        if value is not None:
            response.headers[name] = value

    return [deployment.to_json() for deployment in deployments]
