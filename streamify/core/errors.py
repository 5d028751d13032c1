from typing import Any, Optional

from fastapi import status


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_FIELDS = "MISSING_FIELDS"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    CONFLICT = "CONFLICT"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    FORBIDDEN = "FORBIDDEN"
    ACCESS_UNAUTHORIZED = "ACCESS_UNAUTHORIZED"
    AUTH_INVALID_TOKEN = "AUTH_INVALID_TOKEN"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class AppError(Exception):
    """Base for errors that map to a stable status code and error kind."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = ErrorCode.INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Any = None,
    ):
        self.message = message or self.default_message
        if error_code:
            self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.VALIDATION_ERROR
    default_message = "Bad Request"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = ErrorCode.RESOURCE_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCode.CONFLICT
    default_message = "Resource already exists"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = ErrorCode.FORBIDDEN
    default_message = "You are not allowed to perform this action"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = ErrorCode.ACCESS_UNAUTHORIZED
    default_message = "Unauthorized Access"


class InternalError(AppError):
    pass
