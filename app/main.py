from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI

from app.core.config import settings
from app.core.exception_handler import register_exception_handlers
from app.core.logging_config import configure_logging
from app.core.middleware import register_middlewares
from app.db.redis_conn import close_redis, connect_redis
from app.db.session import Database

# Routers
from app.api.v1.endpoints import book


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    # Startup: connect to the database and, when configured, to Redis
    database = Database(settings)
    await database.connect()
    app.state.database = database
    app.state.redis = await connect_redis(settings)

    try:
        yield
    finally:
        # Shutdown
        try:
            await close_redis(app.state.redis)
        finally:
            await database.disconnect()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        lifespan=lifespan,
    )

    # Register all middleware
    register_middlewares(app)

    # Register all exception handlers
    register_exception_handlers(app)

    app.include_router(book.router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.VERSION,
        }

    return app


app = create_application()
