"""
Start-up data: default wellness tips and the bootstrap superadmin.
"""
from typing import List

from medora import config
from medora.core.access import Role
from medora.core.passwords import get_password_hash
from medora.models.domain import TipCategory, User, WellnessTip
from medora.services.store import InMemoryStore
from medora.utils import get_logger

logger = get_logger(__name__)

DEFAULT_WELLNESS_TIPS = [
    {
        "title": "Stay Hydrated",
        "content": "Drink at least 8 glasses of water daily to maintain optimal health.",
        "category": TipCategory.NUTRITION,
        "tags": ["hydration", "health"],
    },
    {
        "title": "Daily Exercise",
        "content": "Aim for 30 minutes of moderate exercise most days of the week.",
        "category": TipCategory.FITNESS,
        "tags": ["exercise", "fitness"],
    },
    {
        "title": "Mindfulness Meditation",
        "content": "Practice 10 minutes of meditation daily to reduce stress and improve mental health.",
        "category": TipCategory.MENTAL_HEALTH,
        "tags": ["meditation", "stress-relief"],
    },
    {
        "title": "Know Your Numbers",
        "content": "Check blood pressure, blood sugar and cholesterol at least once a year.",
        "category": TipCategory.PREVENTIVE_CARE,
        "tags": ["screening", "checkup"],
    },
]


def seed_wellness_tips(store: InMemoryStore, replace: bool = True) -> List[WellnessTip]:
    """Load the default tips. With ``replace`` existing tips are dropped first."""
    if replace:
        store.tips.clear()
    tips = [store.add_tip(WellnessTip(**tip)) for tip in DEFAULT_WELLNESS_TIPS]
    logger.info(f"Seeded {len(tips)} wellness tips")
    return tips


def ensure_superadmin(
    store: InMemoryStore,
    user_id: str = config.SUPERADMIN_ID,
    name: str = config.SUPERADMIN_NAME,
    email: str = config.SUPERADMIN_EMAIL,
    password: str = config.SUPERADMIN_PASSWORD,
) -> User:
    """
    Register the bootstrap superadmin unless it already exists.

    Without a password the account can only be reached with a token from
    scripts/create_superadmin.py.
    """
    existing = store.get_user(user_id) or store.find_user_by_email(email)
    if existing is not None:
        return existing
    return store.add_user(User(
        id=user_id,
        name=name,
        email=email,
        role=Role.SUPERADMIN,
        password_hash=get_password_hash(password) if password else None,
    ))
