# app/core/exception_handler.py
"""Render every error as the standard response envelope."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import BookAPIException, ErrorKind
from app.schemas.response_schema import APIResponse

logger = logging.getLogger(__name__)

# Summary message per error kind; the exception detail goes in `error`.
# Store failures carry their own per-operation summary instead.
KIND_MESSAGES = {
    ErrorKind.NOT_FOUND: "Book not found",
    ErrorKind.CONFLICT: "Book with this ISBN already exists",
    ErrorKind.INVALID_ARGUMENT: "Invalid book ID",
}


def _envelope(status_code: int, body: APIResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=body.model_dump(mode="json", exclude_none=True)
    )


def _describe(error: dict) -> str:
    field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{field or 'body'}: {error.get('msg', 'is invalid')}"


async def book_api_exception_handler(
    request: Request, exc: BookAPIException
) -> JSONResponse:
    if exc.kind is ErrorKind.STORE_ERROR:
        logger.error(
            "Store failure",
            extra={
                "path": request.url.path,
                "request_id": getattr(request.state, "request_id", None),
                "error": exc.error,
            },
        )
        message, error_text = exc.detail, exc.error or exc.detail
    else:
        message = KIND_MESSAGES[exc.kind]
        error_text = exc.detail if exc.error is None else f"{exc.detail} {exc.error}"
    return _envelope(exc.status_code, APIResponse.fail(message, error=error_text))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(_describe(error) for error in exc.errors())
    return _envelope(
        status.HTTP_400_BAD_REQUEST, APIResponse.fail("Validation failed", error=messages)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "request_id": getattr(request.state, "request_id", None),
        },
    )
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        APIResponse.fail("Internal server error", error=str(exc)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookAPIException, book_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
