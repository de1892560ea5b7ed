"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    MedoraError,
    NotFoundError,
    ForbiddenError,
    AuthError,
    RecordValidationError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "MedoraError",
    "NotFoundError",
    "ForbiddenError",
    "AuthError",
    "RecordValidationError",
]
