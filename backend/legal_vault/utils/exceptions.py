"""
Custom exception classes

Every error the API reports carries one of the ErrorCode values so clients
can branch on the code instead of parsing messages.
"""
import enum
from typing import Any, Optional

from fastapi import HTTPException, status


class ErrorCode(str, enum.Enum):
    not_found = "not_found"
    already_exists = "already_exists"
    forbidden = "forbidden"
    unauthorized = "unauthorized"
    validation_error = "validation_error"
    internal_error = "internal_error"


class AppError(HTTPException):
    """Base class for all application errors"""

    code: ErrorCode = ErrorCode.internal_error
    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, *, field: Optional[str] = None, extra: Optional[Any] = None):
        super().__init__(status_code=self.status_code_default, detail=detail)
        self.field = field
        self.extra = extra

    def to_dict(self) -> dict:
        body = {"detail": self.detail, "code": self.code.value}
        if self.field:
            body["field"] = self.field
        if self.extra is not None:
            body["extra"] = self.extra
        return body


class NotFoundError(AppError):
    """Raised when a referenced entity doesn't exist"""
    code = ErrorCode.not_found
    status_code_default = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: Any = None):
        detail = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        super().__init__(detail)
        self.entity = entity
        self.entity_id = entity_id


class AlreadyExistsError(AppError):
    """Raised on a uniqueness violation of a name-like field"""
    code = ErrorCode.already_exists
    status_code_default = status.HTTP_409_CONFLICT

    def __init__(self, entity: str, field: str, value: Any):
        super().__init__(f"{entity} already exists", field=field, extra={"value": value})


class ForbiddenError(AppError):
    """Raised when a role or ownership check fails"""
    code = ErrorCode.forbidden
    status_code_default = status.HTTP_403_FORBIDDEN

    def __init__(self, detail: str = "You don't have permission to access this resource"):
        super().__init__(detail)


class UnauthorizedError(AppError):
    code = ErrorCode.unauthorized
    status_code_default = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)
        self.headers = {"WWW-Authenticate": "Bearer"}


class ValidationError(AppError):
    """Raised when a required field is missing or malformed"""
    code = ErrorCode.validation_error
    status_code_default = status.HTTP_400_BAD_REQUEST


class InternalError(AppError):
    """Raised when the store or a collaborator fails"""
    code = ErrorCode.internal_error
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str = "Internal Server Error"):
        super().__init__(detail)
