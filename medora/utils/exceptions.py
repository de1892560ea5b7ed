"""
Domain Errors

Each error class fixes its HTTP status and machine-readable code; the app's
exception handler turns any MedoraError into

    {"error": <code>, "message": <message>, "details": {...}}

with ``status_code`` and any ``headers`` the error carries.
"""
from typing import Any, Dict, Optional


class MedoraError(Exception):
    """Base class; raise a subclass from route handlers and services."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})
        self.headers: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class NotFoundError(MedoraError):
    """Unknown id, or an entity the caller must not learn exists."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str, resource: str = "unknown", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"resource": resource, **(details or {})})
        self.resource = resource


class ForbiddenError(MedoraError):
    status_code = 403
    code = "FORBIDDEN"


class AuthError(MedoraError):
    """Missing, expired or unusable bearer token."""

    status_code = 401
    code = "AUTH_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.headers = {"WWW-Authenticate": "Bearer"}


class RecordValidationError(MedoraError):
    """Well-formed input that breaks a domain rule (duplicate email, bad token...)."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str = "unknown", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"field": field, **(details or {})})
        self.field = field
