"""
Reminder endpoints.

Every open reminder owns exactly one scheduled notification; editing a
reminder replaces it and completing or deleting a reminder drops it.
"""
from fastapi import APIRouter, Depends

from medora.api.auth import get_current_user
from medora.api.deps import get_notifier, get_store
from medora.models.domain import Reminder, User
from medora.models.schemas import ReminderCreate, ReminderUpdate
from medora.services import InMemoryStore, Notifier
from medora.utils import NotFoundError

router = APIRouter(prefix="/api/reminders", tags=["Reminders"])


def _owned_reminder(store: InMemoryStore, reminder_id: str, user: User) -> Reminder:
    reminder = store.get_reminder(reminder_id)
    if reminder is None or reminder.user_id != user.id:
        raise NotFoundError("Reminder not found", resource="reminder", details={"id": reminder_id})
    return reminder


async def _schedule(notifier: Notifier, reminder: Reminder) -> None:
    await notifier.notify_user(
        reminder.user_id,
        f"Reminder: {reminder.title}",
        reminder.message,
        reminder_id=reminder.id,
        scheduled_at=reminder.remind_at,
    )


@router.get("")
async def list_reminders(user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return [r.to_dict() for r in store.list_reminders(user.id)]


@router.post("", status_code=201)
async def create_reminder(
    request: ReminderCreate,
    user: User = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
):
    reminder = store.add_reminder(Reminder(
        user_id=user.id,
        title=request.title,
        message=request.message or request.title,
        type=request.type,
        remind_at=request.remind_at,
    ))
    await _schedule(notifier, reminder)
    return reminder.to_dict()


@router.get("/upcoming")
async def upcoming_reminders(user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return [r.to_dict() for r in store.upcoming_reminders(user.id)]


@router.put("/{reminder_id}")
async def update_reminder(
    reminder_id: str,
    request: ReminderUpdate,
    user: User = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
):
    reminder = _owned_reminder(store, reminder_id, user)
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    for name, value in changes.items():
        setattr(reminder, name, value)

    store.delete_notifications_for_reminder(reminder.id)
    if not reminder.is_completed:
        await _schedule(notifier, reminder)
    return reminder.to_dict()


@router.delete("/{reminder_id}")
async def delete_reminder(reminder_id: str, user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    reminder = _owned_reminder(store, reminder_id, user)
    store.delete_reminder(reminder.id)
    return {"message": "Reminder deleted successfully"}
