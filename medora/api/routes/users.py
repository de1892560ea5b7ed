"""
Account endpoints: registration, password login and the caller's profile.
"""
from fastapi import APIRouter, Depends

from medora.api.auth import create_access_token, get_current_user
from medora.api.deps import get_store
from medora.core.passwords import get_password_hash, verify_password
from medora.models.domain import User, UserStatus
from medora.models.schemas import PushTokenUpdate, UserLogin, UserRegister
from medora.services import InMemoryStore, is_expo_push_token
from medora.utils import AuthError, ForbiddenError, RecordValidationError, get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Users"])


def _token_response(user: User) -> dict:
    return {
        "user": user.to_dict(),
        "accessToken": create_access_token(user.id, user.role),
        "tokenType": "bearer",
    }


@router.post("/api/auth/register", status_code=201)
def register(request: UserRegister, store: InMemoryStore = Depends(get_store)):
    user = store.add_user(User(
        name=request.name,
        email=request.email.strip(),
        gender=request.gender,
        phone_number=request.phone_number,
        expo_push_token=request.expo_push_token,
        password_hash=get_password_hash(request.password),
    ))
    return _token_response(user)


@router.post("/api/auth/login")
def login(request: UserLogin, store: InMemoryStore = Depends(get_store)):
    """Exchange email and password for a fresh access token."""
    user = store.find_user_by_email(request.email)
    if user is None or not verify_password(request.password, user.password_hash):
        logger.warning("Failed login", extra={"email": request.email.strip().lower()})
        raise AuthError("Invalid credentials")
    if user.status == UserStatus.BLOCKED:
        raise ForbiddenError("Account is blocked")
    return _token_response(user)


@router.get("/api/profile")
async def get_profile(user: User = Depends(get_current_user)):
    return user.to_dict()


@router.put("/api/profile/push-token")
async def update_push_token(request: PushTokenUpdate, user: User = Depends(get_current_user)):
    if request.expo_push_token is not None and not is_expo_push_token(request.expo_push_token):
        raise RecordValidationError("Invalid Expo push token", field="expoPushToken")
    user.expo_push_token = request.expo_push_token
    return {"message": "Push token updated"}
