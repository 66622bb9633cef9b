"""
Error taxonomy shared by the repositories and the HTTP layer.

Repositories raise these; main.py maps them to responses. Nothing below the
routes ever builds a response body itself.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, key: Optional[str] = None):
        message = f"{entity} with ID '{key}' not found" if key else f"{entity} not found"
        super().__init__(message, {"entity": entity, "key": key} if key else {"entity": entity})
        self.entity = entity
        self.key = key


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class DatabaseError(AppError):
    code = "DATABASE_ERROR"

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        operation: Optional[str] = None,
        key: Optional[str] = None,
        retryable: bool = False,
    ):
        details = {"entity": entity, "operation": operation, "retryable": retryable}
        if key is not None:
            details["key"] = key
        super().__init__(message, details)
        self.entity = entity
        self.operation = operation
        self.key = key
        self.retryable = retryable

    @property
    def status_code(self):
        return 503 if self.retryable else 500


class ConfigurationError(AppError):
    status_code = 503
    code = "CONFIGURATION_ERROR"


class AuthenticationError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
