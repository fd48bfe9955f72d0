# app/core/exceptions.py
"""
Application exception hierarchy.

Every error that may reach an HTTP handler derives from BookAPIException and
carries an ErrorKind tag. Handlers map errors to responses by kind, never by
inspecting the message text.

Cache errors live in a separate hierarchy: they are always absorbed by the
service layer and degrade to a cache miss.
"""
from enum import Enum
from typing import Optional

from fastapi import status


class ErrorKind(str, Enum):
    """Classification of service-level failures."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_ARGUMENT = "invalid_argument"
    STORE_ERROR = "store_error"


class BookAPIException(Exception):
    """Base class for errors surfaced to API clients."""

    kind: ErrorKind = ErrorKind.STORE_ERROR
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "An unexpected error occurred."

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        error: Optional[str] = None,
        resource_type: Optional[str] = None,
    ):
        self.detail = detail or self.default_detail
        self.error = error
        self.resource_type = resource_type
        super().__init__(self.detail)


class ResourceNotFound(BookAPIException):
    kind = ErrorKind.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."


class ResourceAlreadyExists(BookAPIException):
    kind = ErrorKind.CONFLICT
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists."


class InvalidArgument(BookAPIException):
    kind = ErrorKind.INVALID_ARGUMENT
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid argument."


class StoreError(BookAPIException):
    kind = ErrorKind.STORE_ERROR
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "An unexpected database error occurred."


# ======= CACHE ERRORS =======


class CacheError(Exception):
    """Any failure talking to the cache."""


class CacheMiss(CacheError):
    """Key absent or expired."""


class CacheDeserializationError(CacheError):
    """Stored payload could not be decoded into the requested type."""
