# app/schemas/response_schema.py
"""Uniform response envelope shared by every endpoint."""
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class APIResponse(BaseModel, Generic[DataT]):
    """`{success, message, data?, error?}`; absent members are omitted."""

    success: bool = Field(..., description="Whether the request succeeded")
    message: str = Field(..., description="Human readable outcome")
    data: Optional[DataT] = Field(None, description="Response payload")
    error: Optional[str] = Field(None, description="Underlying error text")

    @classmethod
    def ok(cls, message: str, data: Optional[DataT] = None) -> "APIResponse[DataT]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, error: Optional[str] = None) -> "APIResponse[DataT]":
        return cls(success=False, message=message, error=error)
