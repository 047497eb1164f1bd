# artify/core/errors.py
from typing import Any, Dict, Optional

from pydantic import BaseModel
from starlette import status


class ErrorResponse(BaseModel):
    success: bool = False
    code: str
    message: str
    details: Optional[Any] = None


class FieldErrorResponse(BaseModel):
    success: bool = False
    fieldErrors: Dict[str, str]


class AppError(Exception):
    def __init__(
            self,
            code: str,
            message: str,
            http_status: int = status.HTTP_400_BAD_REQUEST,
            details: Any | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(code=self.code, message=self.message, details=self.details)


class ValidationError(AppError):
    """Malformed or missing input. Carries a field name -> message map."""

    def __init__(self, field_errors: Dict[str, str], message: str = "Invalid form data"):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            http_status=status.HTTP_400_BAD_REQUEST,
        )
        self.field_errors = dict(field_errors)

    def to_response(self) -> FieldErrorResponse:
        return FieldErrorResponse(fieldErrors=self.field_errors)


class AuthorizationError(AppError):
    def __init__(self, message: str = "Not permitted", details: Any | None = None):
        super().__init__(
            code="NOT_PERMITTED",
            message=message,
            http_status=status.HTTP_403_FORBIDDEN,
            details=details,
        )


class NotFoundError(AppError):
    def __init__(self, message: str = "Not found", details: Any | None = None):
        super().__init__(
            code="NOT_FOUND",
            message=message,
            http_status=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class InvalidStateError(AppError):
    def __init__(self, message: str = "Action not allowed in current state", details: Any | None = None):
        super().__init__(
            code="INVALID_STATE",
            message=message,
            http_status=status.HTTP_409_CONFLICT,
            details=details,
        )


class ConflictError(AppError):
    def __init__(self, message: str = "Already exists", details: Any | None = None):
        super().__init__(
            code="CONFLICT",
            message=message,
            http_status=status.HTTP_409_CONFLICT,
            details=details,
        )
