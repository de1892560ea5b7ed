"""
Notification dispatch: persist first, then hand off to push delivery.
"""
from datetime import datetime
from typing import List, Optional

from medora.models.domain import Notification, NotificationAudience, User
from medora.services.push import ExpoPushClient
from medora.services.store import InMemoryStore
from medora.utils import get_logger

logger = get_logger(__name__)


class Notifier:
    def __init__(self, store: InMemoryStore, push: ExpoPushClient):
        self.store = store
        self.push = push

    async def notify_user(
        self,
        user_id: str,
        title: str,
        message: str,
        reminder_id: Optional[str] = None,
        scheduled_at: Optional[datetime] = None,
    ) -> Notification:
        """
        Store a notification for one user and push it unless it is scheduled
        for later.
        """
        notification = self.store.add_notification(Notification(
            title=title,
            message=message,
            user_id=user_id,
            role=NotificationAudience.USER,
            reminder_id=reminder_id,
            scheduled_at=scheduled_at,
        ))
        logger.info(f"Notification {notification.id} stored for user {user_id}: {title}")

        if scheduled_at is None:
            user = self.store.get_user(user_id)
            if user is not None and user.expo_push_token:
                await self.push.send(user.expo_push_token, title, message)
        return notification

    async def broadcast(
        self,
        title: str,
        message: str,
        role: NotificationAudience = NotificationAudience.ALL,
        scheduled_at: Optional[datetime] = None,
    ) -> Notification:
        """Store one audience-wide notification and push it to every matching user."""
        notification = self.store.add_notification(Notification(
            title=title,
            message=message,
            role=role,
            scheduled_at=scheduled_at,
        ))
        recipients = self._audience(role)
        logger.info(f"Broadcast {notification.id} to '{role.value}' ({len(recipients)} users)")

        if scheduled_at is None:
            for user in recipients:
                if user.expo_push_token:
                    await self.push.send(user.expo_push_token, title, message)
        return notification

    def _audience(self, role: NotificationAudience) -> List[User]:
        users = self.store.list_users()
        if role == NotificationAudience.ALL:
            return users
        return [u for u in users if u.role.value == role.value]
