from fastapi import APIRouter

from gitlab_deployments import __version__
from gitlab_deployments.config import settings
from gitlab_deployments.schemas.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        service=settings.APP_NAME,
        version=__version__,
        gitlab_url=settings.GITLAB_BASE_URL,
    )
