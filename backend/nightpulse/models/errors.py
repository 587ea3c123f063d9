"""Error models shared by the service layer and the API."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Machine-readable error codes returned by the API."""

    INVALID_INPUT = "INVALID_INPUT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    API_ERROR = "API_ERROR"


class AppError(BaseModel):
    """Error payload included in unsuccessful API responses."""

    code: ErrorCode
    message: str
    user_message: str = Field(..., description="Message safe to show to end users")
    field: Optional[str] = None


class InvalidArgumentError(ValueError):
    """Raised when a caller passes malformed coordinates or a bad radius.

    This is caller misuse, so it propagates instead of triggering the
    mock-data fallback.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
