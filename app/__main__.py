"""Run the Library API with uvicorn: ``python -m app``."""
import uvicorn

from app.core.config import settings


def main() -> None:
    """Run the API server. Uvicorn drains in-flight requests on SIGINT/SIGTERM."""
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
        access_log=False,
        timeout_graceful_shutdown=30,
    )


if __name__ == "__main__":
    main()
