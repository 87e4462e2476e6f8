"""FastAPI application entry point for the Homely API."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from homely.api.exception_handlers import register_exception_handlers
from homely.api.middleware import AuthMiddleware, RequestIDMiddleware, SecurityHeadersMiddleware
from homely.api.routes import ROUTERS
from homely.core.config import get_settings
from homely.core.database import close_db, init_db
from homely.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle - startup and shutdown events."""
    # Initialize logging first (before any other initialization)
    setup_logging()

    settings = get_settings()
    await init_db()
    logger.info(
        f"{settings.app_name} started in {settings.environment_name} environment "
        f"(auth {'enabled' if settings.auth_enabled else 'disabled'})"
    )

    yield

    await close_db()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Build the application with middleware, exception handlers and routers."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Household management: chores, recurring events and members",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Starlette runs the last-added middleware first: CORS, request id, headers, auth.
    app.add_middleware(AuthMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("homely.main:app", host=settings.api_host, port=settings.api_port)
