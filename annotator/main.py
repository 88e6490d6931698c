# annotator/main.py
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from annotator import __version__
from annotator.adapters.api.routers import health, words
from annotator.shared.config import AppEnv, settings
from annotator.shared.container import container
from annotator.shared.logging_config import configure_logging
from annotator.shared.observability import instrument_fastapi, setup_telemetry

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application Lifecycle Manager.
    Startup: telemetry and the word store schema. Shutdown: log only.
    """
    setup_telemetry(settings.OTEL_SERVICE_NAME)

    logger.info("app_startup", app=settings.APP_NAME, env=settings.APP_ENV.value)

    # Fail fast on a broken store configuration
    repository = container.word_repository()
    await repository.initialize()

    yield

    logger.info("app_shutdown")


def create_app() -> FastAPI:
    """Factory function to create the FastAPI application."""
    configure_logging(settings)

    # Routers resolve their dependencies through @inject / Provide markers
    container.wire(modules=[words, health])

    app = FastAPI(
        title="Word Annotator",
        version=__version__,
        description="Linguistic annotation of single words for speech-therapy exercises",
        docs_url="/docs" if settings.APP_ENV != AppEnv.PRODUCTION else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.container = container

    origins = ["*"] if settings.DEBUG else []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    instrument_fastapi(app)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Standardizes HTTP errors (including 401/403 Auth failures)."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "status": "error",
                "code": exc.status_code,
                "message": exc.detail,
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catches unhandled exceptions so stack traces never leak in production."""
        logger.error("unhandled_exception", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "error",
                "code": 500,
                "message": "Internal Server Error" if not settings.DEBUG else str(exc),
            },
        )

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(words.router, prefix="/api/v1")

    return app


# Entry point for local debugging (`uvicorn annotator.main:create_app --factory`)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("annotator.main:create_app", host="0.0.0.0", port=8000, reload=True, factory=True)
