"""
Role-based access guard.

A pure check from (caller role, required role) to allow/deny. The HTTP
layer composes it ahead of protected handlers; see medora.api.auth.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class Role(str, Enum):
    USER       = "user"
    ADMIN      = "admin"
    SUPERADMIN = "superadmin"


ACCESS_DENIED_MESSAGE = "Access denied"


def is_allowed(caller_role: Optional[Any], required_role: Any) -> bool:
    """Exact role match. A caller without a role is always denied."""
    if caller_role is None:
        return False
    try:
        return Role(caller_role) == Role(required_role)
    except ValueError:
        return False
