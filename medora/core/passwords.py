"""
Password hashing (bcrypt via passlib).

Only hashes are stored on User; plain passwords never leave the request.
"""
from typing import Optional

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """False for accounts without a password (e.g. the bootstrap superadmin)."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
