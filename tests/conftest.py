"""
Pytest Configuration and Fixtures

Shared fixtures: a seeded store, a push client backed by a mock transport,
an application bound to both, and authenticated callers.
"""
import pytest
import httpx
from pathlib import Path
from typing import Dict, List
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from medora.api.auth import create_access_token
from medora.core.access import Role
from medora.main import create_app
from medora.models.domain import Gender, User
from medora.services import ExpoPushClient, InMemoryStore, ensure_superadmin, seed_wellness_tips

PUSH_TOKEN = "ExponentPushToken[test-device-001]"


@pytest.fixture
def store() -> InMemoryStore:
    """Fresh store with default tips and the bootstrap superadmin."""
    s = InMemoryStore()
    seed_wellness_tips(s)
    ensure_superadmin(s)
    return s


@pytest.fixture
def push_requests() -> List[httpx.Request]:
    """Requests captured by the mock Expo endpoint."""
    return []


@pytest.fixture
def push_client(push_requests) -> ExpoPushClient:
    def handler(request: httpx.Request) -> httpx.Response:
        push_requests.append(request)
        return httpx.Response(200, json={"data": [{"status": "ok", "id": "ticket-1"}]})

    return ExpoPushClient(
        url="https://push.test/send",
        enabled=True,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def app(store, push_client):
    return create_app(store=store, push=push_client)


@pytest.fixture
async def async_client(app):
    """Create async test client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
def patient(store) -> User:
    return store.add_user(User(
        name="Asha Menon",
        email="asha@example.com",
        gender=Gender.FEMALE,
        expo_push_token=PUSH_TOKEN,
    ))


@pytest.fixture
def other_patient(store) -> User:
    return store.add_user(User(name="Ravi Kumar", email="ravi@example.com", gender=Gender.MALE))


def bearer(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def patient_headers(patient) -> Dict[str, str]:
    return bearer(patient)


@pytest.fixture
def other_headers(other_patient) -> Dict[str, str]:
    return bearer(other_patient)


@pytest.fixture
def superadmin_headers(store) -> Dict[str, str]:
    admin = ensure_superadmin(store)
    assert admin.role == Role.SUPERADMIN
    return bearer(admin)
