"""Common Pydantic v2 schemas shared across the API."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response body.

    Dependency failures during login add ``error`` and ``poc_error``.
    """

    msg: str = Field(description="Human-readable error message")
    error: str | None = Field(default=None, description="Underlying error detail")
    poc_error: Any = Field(default=None, description="Error payload returned by the peer service")
    errors: list[dict] | None = Field(default=None, description="Detailed request validation errors")


class HealthResponse(BaseModel):
    """Liveness probe response."""

    status: str
