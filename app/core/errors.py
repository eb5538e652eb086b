"""
Typed failures raised by stores and services.

The HTTP layer renders every DomainError in the same envelope:
{"error": {"code": ..., "message": ..., "status": ...}}
"""

from __future__ import annotations


class DomainError(Exception):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "status": self.status_code,
            }
        }


class ConflictError(DomainError):
    code = "CONFLICT"
    status_code = 409


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    status_code = 404


class ForbiddenError(DomainError):
    code = "FORBIDDEN"
    status_code = 403


class ValidationFailedError(DomainError):
    code = "VALIDATION_FAILED"
    status_code = 422


class AuthenticationRequiredError(DomainError):
    code = "UNAUTHENTICATED"
    status_code = 401


class StoreFailureError(DomainError):
    """Opaque persistence failure. Never carries engine detail."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
