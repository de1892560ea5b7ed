"""
In-Memory Store

Process-local collections for every entity the API serves. One re-entrant
lock guards all collections; listings return copies of the id ordering so
callers can iterate without holding the lock.

Lookups return None for unknown ids. Raising NotFoundError / ForbiddenError
is left to the route handlers, which know the caller.
"""
from __future__ import annotations

import math
import threading
from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional, Tuple, TypeVar

from medora.core.access import Role
from medora.models.domain import (
    FamilyMember,
    Notification,
    NotificationAudience,
    Prediction,
    Record,
    RecordCategory,
    Reminder,
    User,
    UserStatus,
    WellnessTip,
    utcnow,
)
from medora.utils import get_logger, RecordValidationError

logger = get_logger(__name__)

T = TypeVar("T")


def paginate(items: List[T], page: int = 1, limit: int = 10) -> Tuple[List[T], int, int]:
    """
    Slice one page out of ``items``.

    Returns:
        (page_items, total, pages). ``page`` and ``limit`` are clamped to 1.
    """
    page = max(1, int(page))
    limit = max(1, int(limit))
    total = len(items)
    start = (page - 1) * limit
    return items[start:start + limit], total, math.ceil(total / limit)


def _newest_first(items):
    return sorted(items, key=lambda item: item.created_at, reverse=True)


class InMemoryStore:
    """All Medora collections, keyed by entity id."""

    def __init__(self):
        self._lock = threading.RLock()
        self.users: Dict[str, User] = {}
        self.records: Dict[str, Record] = {}
        self.predictions: Dict[str, Prediction] = {}       # keyed by record_id
        self.reminders: Dict[str, Reminder] = {}
        self.notifications: Dict[str, Notification] = {}
        self.tips: Dict[str, WellnessTip] = {}
        self.family: Dict[str, FamilyMember] = {}

    def clear(self) -> None:
        with self._lock:
            for collection in (self.users, self.records, self.predictions, self.reminders,
                               self.notifications, self.tips, self.family):
                collection.clear()

    # ── Users ────────────────────────────────────────────────────────────

    def add_user(self, user: User) -> User:
        with self._lock:
            if self.find_user_by_email(user.email) is not None:
                raise RecordValidationError(f"Email already registered: {user.email}", field="email")
            self.users[user.id] = user
        logger.info(f"Registered user {user.id} ({user.role.value})")
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def find_user_by_email(self, email: str) -> Optional[User]:
        wanted = email.strip().lower()
        for user in list(self.users.values()):
            if user.email.strip().lower() == wanted:
                return user
        return None

    def list_users(
        self,
        role: Optional[Role] = None,
        status: Optional[UserStatus] = None,
        search: str = "",
    ) -> List[User]:
        """Users newest first, filtered by role, status and a name/email substring."""
        needle = search.replace(":", "").strip().lower()
        with self._lock:
            users = list(self.users.values())
        result = []
        for user in users:
            if role is not None and user.role != role:
                continue
            if status is not None and user.status != status:
                continue
            if needle and needle not in user.name.lower() and needle not in user.email.lower():
                continue
            result.append(user)
        return _newest_first(result)

    def set_user_status(self, user_id: str, status: UserStatus) -> Optional[User]:
        with self._lock:
            user = self.users.get(user_id)
            if user is None:
                return None
            user.status = status
        logger.info(f"User {user_id} status -> {status.value}")
        return user

    def delete_user(self, user_id: str) -> bool:
        """Remove a user together with everything they own."""
        with self._lock:
            if self.users.pop(user_id, None) is None:
                return False
            for record in [r for r in self.records.values() if r.user_id == user_id]:
                self.delete_record(record.id)
            for collection in (self.reminders, self.notifications, self.family):
                for key in [k for k, v in collection.items() if v.user_id == user_id]:
                    del collection[key]
        logger.info(f"Deleted user {user_id} and owned data")
        return True

    # ── Records ──────────────────────────────────────────────────────────

    def add_record(self, record: Record) -> Record:
        with self._lock:
            self.records[record.id] = record
        return record

    def get_record(self, record_id: str) -> Optional[Record]:
        return self.records.get(record_id)

    def list_records(
        self,
        user_id: Optional[str] = None,
        category: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[Record]:
        """Records newest first. ``category`` matches case-insensitively."""
        wanted_category = category.strip().lower() if category else None
        with self._lock:
            records = list(self.records.values())
        result = []
        for record in records:
            if user_id is not None and record.user_id != user_id:
                continue
            if wanted_category and record.category.value.lower() != wanted_category:
                continue
            if date_from is not None and record.created_at < date_from:
                continue
            if date_to is not None and record.created_at > date_to:
                continue
            result.append(record)
        return _newest_first(result)

    def count_records_by_category(self, user_id: Optional[str] = None) -> Dict[RecordCategory, int]:
        counts = Counter(r.category for r in self.list_records(user_id=user_id))
        return {category: counts.get(category, 0) for category in RecordCategory}

    def flag_record(self, record_id: str) -> Optional[Record]:
        with self._lock:
            record = self.records.get(record_id)
            if record is not None:
                record.flagged = True
        return record

    def delete_record(self, record_id: str) -> bool:
        """Remove a record and its prediction."""
        with self._lock:
            removed = self.records.pop(record_id, None)
            self.predictions.pop(record_id, None)
        return removed is not None

    # ── Predictions ──────────────────────────────────────────────────────

    def save_prediction(self, prediction: Prediction) -> Prediction:
        """Store a prediction, replacing any earlier one for the same record."""
        with self._lock:
            self.predictions[prediction.record_id] = prediction
        return prediction

    def get_prediction(self, record_id: str) -> Optional[Prediction]:
        return self.predictions.get(record_id)

    def list_predictions(self, user_id: Optional[str] = None) -> List[Prediction]:
        with self._lock:
            predictions = list(self.predictions.values())
        if user_id is not None:
            predictions = [p for p in predictions if p.user_id == user_id]
        return _newest_first(predictions)

    # ── Reminders ────────────────────────────────────────────────────────

    def add_reminder(self, reminder: Reminder) -> Reminder:
        with self._lock:
            self.reminders[reminder.id] = reminder
        return reminder

    def get_reminder(self, reminder_id: str) -> Optional[Reminder]:
        return self.reminders.get(reminder_id)

    def list_reminders(self, user_id: str) -> List[Reminder]:
        """A user's reminders, soonest first."""
        with self._lock:
            reminders = [r for r in self.reminders.values() if r.user_id == user_id]
        return sorted(reminders, key=lambda r: r.remind_at)

    def upcoming_reminders(self, user_id: str, now: Optional[datetime] = None) -> List[Reminder]:
        now = now or utcnow()
        return [r for r in self.list_reminders(user_id) if r.remind_at >= now and not r.is_completed]

    def delete_reminder(self, reminder_id: str) -> Optional[Reminder]:
        with self._lock:
            reminder = self.reminders.pop(reminder_id, None)
            if reminder is not None:
                self.delete_notifications_for_reminder(reminder_id)
        return reminder

    # ── Notifications ────────────────────────────────────────────────────

    def add_notification(self, notification: Notification) -> Notification:
        with self._lock:
            self.notifications[notification.id] = notification
        return notification

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        return self.notifications.get(notification_id)

    def list_notifications_for_user(self, user_id: str, now: Optional[datetime] = None) -> List[Notification]:
        """
        The user's inbox: their own notifications plus user-wide broadcasts
        they have not dismissed. Notifications scheduled for later stay
        hidden until they fall due.
        """
        now = now or utcnow()
        with self._lock:
            notes = list(self.notifications.values())
        return _newest_first([n for n in notes if self._in_inbox(n, user_id, now)])

    @staticmethod
    def _in_inbox(notification: Notification, user_id: str, now: datetime) -> bool:
        if not notification.is_due(now):
            return False
        if notification.is_broadcast:
            return (
                notification.role in (NotificationAudience.USER, NotificationAudience.ALL)
                and user_id not in notification.dismissed_by
            )
        return notification.user_id == user_id

    def get_notification_for_user(self, notification_id: str, user_id: str) -> Optional[Notification]:
        """The notification if it is currently in the user's inbox, else None."""
        notification = self.notifications.get(notification_id)
        if notification is None or not self._in_inbox(notification, user_id, utcnow()):
            return None
        return notification

    def list_broadcasts(self) -> List[Notification]:
        with self._lock:
            notes = list(self.notifications.values())
        return _newest_first([n for n in notes if n.is_broadcast])

    def mark_read(self, notification: Notification, user_id: str) -> Notification:
        with self._lock:
            if notification.is_broadcast:
                notification.read_by.add(user_id)
            else:
                notification.is_read = True
        return notification

    def mark_all_read(self, user_id: str) -> int:
        """Mark everything in the user's inbox read; returns how many changed."""
        with self._lock:
            unread = [n for n in self.list_notifications_for_user(user_id) if not n.is_read_by(user_id)]
            for n in unread:
                self.mark_read(n, user_id)
        return len(unread)

    def count_unread(self, user_id: str) -> int:
        return sum(1 for n in self.list_notifications_for_user(user_id) if not n.is_read_by(user_id))

    def delete_notification(self, notification_id: str) -> bool:
        with self._lock:
            return self.notifications.pop(notification_id, None) is not None

    def dismiss_notification(self, notification: Notification, user_id: str) -> None:
        """Remove from one user's inbox: own notifications are deleted, broadcasts hidden for them."""
        with self._lock:
            if notification.is_broadcast:
                notification.dismissed_by.add(user_id)
            else:
                self.notifications.pop(notification.id, None)

    def delete_notifications_for_user(self, user_id: str) -> int:
        """Clear the user's inbox. Broadcasts are only hidden for this user."""
        with self._lock:
            inbox = self.list_notifications_for_user(user_id)
            for n in inbox:
                self.dismiss_notification(n, user_id)
        return len(inbox)

    def delete_notifications_for_reminder(self, reminder_id: str) -> int:
        with self._lock:
            doomed = [k for k, n in self.notifications.items() if n.reminder_id == reminder_id]
            for key in doomed:
                del self.notifications[key]
        return len(doomed)

    # ── Wellness tips ────────────────────────────────────────────────────

    def add_tip(self, tip: WellnessTip) -> WellnessTip:
        with self._lock:
            self.tips[tip.id] = tip
        return tip

    def list_tips(self, limit: Optional[int] = None) -> List[WellnessTip]:
        with self._lock:
            tips = list(self.tips.values())
        return tips[:limit] if limit is not None else tips

    # ── Family members ───────────────────────────────────────────────────

    def add_family_member(self, member: FamilyMember) -> FamilyMember:
        with self._lock:
            self.family[member.id] = member
        return member

    def get_family_member(self, member_id: str) -> Optional[FamilyMember]:
        return self.family.get(member_id)

    def list_family(self, user_id: str) -> List[FamilyMember]:
        with self._lock:
            members = [m for m in self.family.values() if m.user_id == user_id]
        return sorted(members, key=lambda m: m.created_at)

    def delete_family_member(self, member_id: str) -> bool:
        with self._lock:
            return self.family.pop(member_id, None) is not None
