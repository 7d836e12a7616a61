"""
Portfolio API - Application
===========================

App factory: logging, lifespan, CORS, error mapping and router wiring.

Run locally with ``python -m portfolio_api.api.main``.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_api.api import (
    admin,
    comments,
    contact,
    experiences,
    learning,
    projects,
    site_settings,
    skills,
    time_tracking,
)
from portfolio_api.core.config import settings
from portfolio_api.core.database import close_db, init_db
from portfolio_api.core.exceptions import PortfolioError
from portfolio_api.core.schemas import ErrorResponse, HealthResponse

ROUTERS = (
    admin.router,
    projects.router,
    skills.router,
    experiences.router,
    contact.router,
    site_settings.router,
    site_settings.contact_router,
    learning.router,
    time_tracking.router,
    comments.router,
)


def configure_logging() -> None:
    """JSON lines in production, coloured console output elsewhere."""
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.is_production
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("portfolio_api_starting", version=settings.APP_VERSION, env=settings.ENVIRONMENT)
    await init_db()
    yield
    await close_db()
    logger.info("portfolio_api_stopped")


# ==========================================================================
# Error Mapping
# ==========================================================================

def _error_response(status_code: int, body: ErrorResponse, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(PortfolioError)
    async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
        # Bearer challenge so clients know to (re)authenticate
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return _error_response(
            exc.status_code,
            ErrorResponse(error=exc.error, detail=exc.detail, code=exc.code),
            headers,
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method,
        )
        detail = str(exc) if settings.is_development else "An unexpected error occurred"
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(error="Internal Server Error", detail=detail, code="INTERNAL_ERROR"),
        )


# ==========================================================================
# App Factory
# ==========================================================================

def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Portfolio website API with a learning tracker",
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/health", response_model=HealthResponse, tags=["Health"], summary="Health check")
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="ok",
            message="Portfolio API is running",
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
        )

    @app.get("/", tags=["Health"], include_in_schema=False)
    async def root() -> dict:
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "health": "/health",
            "api": settings.API_PREFIX,
        }

    for router in ROUTERS:
        app.include_router(router, prefix=settings.API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "portfolio_api.api.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development,
    )
