"""
Bearer-token authentication and role gating.

Tokens are HS256 JWTs carrying ``sub`` (user id) and ``role``. Handlers
depend on ``get_current_user`` for identity, or on ``require_role(...)``
to additionally enforce a role before the handler runs:

    @router.get("/stats", dependencies=[Depends(require_role(Role.SUPERADMIN))])
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from medora import config
from medora.api.deps import get_store
from medora.core.access import ACCESS_DENIED_MESSAGE, Role, is_allowed
from medora.models.domain import User, UserStatus
from medora.services import InMemoryStore
from medora.utils import AuthError, ForbiddenError, get_logger

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: str,
    role: Role = Role.USER,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {"sub": user_id, "role": Role(role).value, "exp": expire}
    return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except ExpiredSignatureError:
        logger.debug("Rejected expired token")
        raise AuthError("Token expired or invalid", details={"reason": "expired"})
    except JWTError as e:
        logger.warning(f"Rejected invalid token: {e}")
        raise AuthError("Token expired or invalid", details={"reason": "invalid"})
    if not payload.get("sub"):
        raise AuthError("Token expired or invalid", details={"reason": "missing subject"})
    return payload


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    store: InMemoryStore = Depends(get_store),
) -> User:
    """Resolve the caller from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Auth token missing")

    payload = decode_access_token(credentials.credentials)
    user = store.get_user(payload["sub"])
    if user is None:
        raise AuthError("User not found", details={"user_id": payload["sub"]})
    if user.status == UserStatus.BLOCKED:
        raise ForbiddenError("Account is blocked")
    return user


def require_role(role: Role):
    """Build a dependency that admits only callers holding ``role``."""

    async def _guard(user: User = Depends(get_current_user)) -> User:
        if not is_allowed(user.role, role):
            logger.warning(f"Access denied: user {user.id} ({user.role.value}) needs {Role(role).value}")
            raise ForbiddenError(ACCESS_DENIED_MESSAGE, details={"required_role": Role(role).value})
        return user

    return _guard
