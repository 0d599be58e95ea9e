"""Base schemas for common response patterns."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str
    message: str
    field: str | None = None
    bytes_written: int | None = None
