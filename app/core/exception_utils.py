import functools
import logging
from typing import Any, Callable, Optional, Type

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import BookAPIException, StoreError

logger = logging.getLogger(__name__)


def raise_for_status(
    *,
    condition: bool,
    exception: Type[BookAPIException],
    detail: Optional[str] = None,
    resource_type: Optional[str] = None,
) -> None:
    """Raise `exception` when `condition` holds."""
    if condition:
        raise exception(detail, resource_type=resource_type)


def handle_exceptions(
    default_exception: Type[BookAPIException] = StoreError,
    message: str = "An unexpected database error occurred.",
) -> Callable:
    """
    Decorator for repository coroutines.

    Application exceptions pass through untouched; any SQLAlchemy failure is
    logged and re-raised as `default_exception` carrying the driver's text.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except BookAPIException:
                raise
            except SQLAlchemyError as e:
                logger.error(
                    f"Database error in {func.__qualname__}",
                    exc_info=True,
                    extra={"operation": func.__qualname__},
                )
                raise default_exception(message, error=str(e)) from e

        return wrapper

    return decorator
