"""
Home dashboard: one round-trip with everything the mobile home screen shows.
"""
from fastapi import APIRouter, Depends

from medora import config
from medora.api.auth import get_current_user
from medora.api.deps import get_store
from medora.models.domain import User
from medora.services import InMemoryStore

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("")
async def get_dashboard(user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    predictions = store.list_predictions(user_id=user.id)
    latest = predictions[0] if predictions else None
    notifications = store.list_notifications_for_user(user.id)[:config.DASHBOARD_ITEMS]
    counts = store.count_records_by_category(user_id=user.id)

    return {
        "latestSeverity": latest.to_dict() if latest else None,
        "notifications": [n.to_dict(viewer=user.id) for n in notifications],
        "unreadNotifications": store.count_unread(user.id),
        "wellnessTips": [t.to_dict() for t in store.list_tips(limit=config.DASHBOARD_ITEMS)],
        "recordCounts": {category.value: n for category, n in counts.items()},
        "upcomingReminders": [r.to_dict() for r in store.upcoming_reminders(user.id)[:config.DASHBOARD_ITEMS]],
    }
