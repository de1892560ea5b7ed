"""
Domain entities and API schemas.
"""
from .domain import (
    User,
    Record,
    Prediction,
    Reminder,
    Notification,
    WellnessTip,
    FamilyMember,
    UserStatus,
    Gender,
    RecordCategory,
    ReminderType,
    NotificationAudience,
    TipCategory,
)

__all__ = [
    "User",
    "Record",
    "Prediction",
    "Reminder",
    "Notification",
    "WellnessTip",
    "FamilyMember",
    "UserStatus",
    "Gender",
    "RecordCategory",
    "ReminderType",
    "NotificationAudience",
    "TipCategory",
]
