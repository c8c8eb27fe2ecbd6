"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(description="Error code")
    message: str = Field(description="Human-readable error message")
    details: Any | None = Field(default=None, description="Additional error details")
    request_id: str | None = Field(default=None, description="Request ID for tracing")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: ErrorDetail

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "FORBIDDEN",
                    "message": "Not allowed to read progress of data belonging to another user",
                    "details": None,
                    "request_id": "req_abc123",
                }
            }
        }
    )


# Shared OpenAPI error documentation for caller-scoped endpoints
SCOPED_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Missing or invalid identity token"},
    403: {"model": ErrorResponse, "description": "Target rows belong to another user"},
}
