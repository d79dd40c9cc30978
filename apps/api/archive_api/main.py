from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from archive_api.core.config import Settings
from archive_api.core.exceptions import AppException
from archive_api.core.logging import get_logger, setup_logging
from archive_api.dependencies import build_engine, build_search_service
from archive_api.routers.search import router as search_router

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(settings)
        app.state.search_service = build_search_service(engine, settings)
        logger.info("Archive API started (aggregation=%s)", settings.facet_aggregation)
        try:
            yield
        finally:
            await engine.dispose()

    app = FastAPI(title="Living Archive API", lifespan=lifespan)
    app.state.settings = settings

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})

    # Mount routers
    app.include_router(search_router, prefix="/api/v1")

    # Simple health for E2E bring-up
    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    return app


app = create_app()
