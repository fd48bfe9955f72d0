# In app/core/middleware.py
import time
import uuid
import logging

from typing import Optional, Set
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from app.core.config import settings

# Get a logger instance
logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a request ID and logs it on the way in and out,
    with status code and latency.
    """

    def __init__(self, app, exclude_paths: Optional[Set[str]] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or {"/health", "/favicon.ico"}

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        should_log = request.url.path not in self.exclude_paths

        if should_log:
            logger.info(
                "Incoming request",
                extra={
                    "request_id": request_id,
                    "client_ip": self._get_client_ip(request),
                    "method": request.method,
                    "path": request.url.path,
                    "user_agent": request.headers.get("user-agent", "unknown"),
                },
            )

        # Exceptions raised here are rendered by the registered exception handlers
        response = await call_next(request)

        process_time = (time.perf_counter() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id

        if should_log:
            logger.info(
                f"{request.method} {request.url.path} {response.status_code} "
                f"{process_time:.2f}ms",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "process_time_ms": round(process_time, 2),
                },
            )

        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP considering proxy headers"""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

        return request.client.host if request.client else "unknown"


def register_middlewares(app: FastAPI):
    """
    Registers all middlewares for the FastAPI application.
    Middleware runs in reverse order of registration.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_cors_origins(),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Length", "Content-Type", "Authorization"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(
        RequestLoggingMiddleware, exclude_paths=settings.LOGGING_EXCLUDE_PATHS
    )

    logger.info("All middlewares registered successfully")


def _get_cors_origins() -> list[str]:
    """Parse the comma separated CORS_ORIGINS setting; '*' allows any origin."""
    origins = [
        origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()
    ]
    if not origins:
        logger.warning("CORS_ORIGINS is empty, allowing all origins")
        return ["*"]
    return origins
