import structlog
import uvicorn
from fastapi import APIRouter, FastAPI

from arena.api.routes.activities import router as activities_router
from arena.api.routes.health import router as health_router
from arena.api.routes.matches import router as matches_router
from arena.api.routes.players import router as players_router
from arena.api.routes.rewards import router as rewards_router
from arena.core.config import get_settings
from arena.core.logging import configure_logging

API_VERSION = "0.1.0"

ROUTERS: tuple[APIRouter, ...] = (
    health_router,
    players_router,
    matches_router,
    rewards_router,
    activities_router,
)

logger = structlog.get_logger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, app_env=settings.app_env)

    docs_enabled = settings.enable_openapi_docs
    app = FastAPI(
        title="Arena Ledger API",
        version=API_VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    for router in ROUTERS:
        app.include_router(router)

    logger.info("app_created", app_env=settings.app_env, openapi_docs=docs_enabled)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "arena.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
