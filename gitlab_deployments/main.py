import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gitlab_deployments import __version__
from gitlab_deployments.api.v1 import deployments, health
from gitlab_deployments.config import settings
from gitlab_deployments.middleware import LoggingMiddleware, register_error_handlers

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="GitLab Deployments",
        description="Read-only access to the deployments of GitLab projects",
        version=__version__,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=list(deployments.PAGINATION_HEADERS),
    )
    app.add_middleware(LoggingMiddleware, enable_detailed_logging=settings.LOG_REQUEST_DETAILS)
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(deployments.router, prefix="/api/v1")

    logger.info(f"🚀 {settings.APP_NAME} {__version__} targeting {settings.GITLAB_BASE_URL}")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(f"🌐 Server: http://localhost:{settings.PORT}")
    uvicorn.run(
        "gitlab_deployments.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
