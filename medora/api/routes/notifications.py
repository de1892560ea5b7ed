"""
In-app notification inbox for the signed-in user.

The inbox holds the caller's own notifications and user-wide broadcasts.
Reading or deleting a broadcast only affects the caller's view of it.
"""
from fastapi import APIRouter, Depends

from medora.api.auth import get_current_user
from medora.api.deps import get_store
from medora.models.domain import Notification, User
from medora.services import InMemoryStore
from medora.utils import NotFoundError

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


def _inbox_notification(store: InMemoryStore, notification_id: str, user: User) -> Notification:
    notification = store.get_notification_for_user(notification_id, user.id)
    if notification is None:
        raise NotFoundError("Notification not found", resource="notification", details={"id": notification_id})
    return notification


@router.get("")
async def list_notifications(user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return [n.to_dict(viewer=user.id) for n in store.list_notifications_for_user(user.id)]


@router.put("/mark-all-read")
async def mark_all_read(user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    updated = store.mark_all_read(user.id)
    return {"message": "All notifications marked as read", "updated": updated}


@router.put("/{notification_id}/read")
async def mark_read(notification_id: str, user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    notification = store.mark_read(_inbox_notification(store, notification_id, user), user.id)
    return notification.to_dict(viewer=user.id)


@router.delete("/delete-all")
async def delete_all(user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    deleted = store.delete_notifications_for_user(user.id)
    return {"message": "All notifications deleted", "deleted": deleted}


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    user: User = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
):
    store.dismiss_notification(_inbox_notification(store, notification_id, user), user.id)
    return {"message": "Notification deleted"}
