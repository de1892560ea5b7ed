"""
API Request / Response Schemas

Pydantic models for request validation. Clients send camelCase keys;
snake_case is accepted too.
"""
from datetime import date, datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, field_validator
from pydantic.alias_generators import to_camel

from medora.models.domain import (
    Gender,
    NotificationAudience,
    RecordCategory,
    ReminderType,
    UserStatus,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---- Severity ----

class ClassifyRequest(CamelModel):
    """A single reading to classify. ``value`` may be null."""
    value: Optional[FiniteFloat] = None
    type: str


class ClassifyResponse(CamelModel):
    type: str
    value: Optional[float] = None
    severity: str


# ---- Records ----

class RecordCreate(CamelModel):
    category: RecordCategory
    description: str = Field(..., min_length=1)
    family_member: Optional[str] = None
    lab_name: Optional[str] = None
    condition: Optional[str] = None
    doctor: Optional[str] = None
    tags: Union[List[str], str, None] = None
    emergency_use: bool = False
    extracted_text: Optional[str] = Field(
        default=None, description="Transcript of the uploaded report (OCR output)"
    )

    @field_validator("tags")
    @classmethod
    def split_tags(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [tag.strip() for tag in v if tag and tag.strip()]


# ---- Reminders ----

class ReminderCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=100)
    message: Optional[str] = Field(default=None, max_length=500)
    type: ReminderType = ReminderType.CUSTOM
    remind_at: datetime

    @field_validator("remind_at")
    @classmethod
    def remind_at_utc(cls, v):
        return _as_utc(v)


class ReminderUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    message: Optional[str] = Field(default=None, max_length=500)
    type: Optional[ReminderType] = None
    remind_at: Optional[datetime] = None
    is_completed: Optional[bool] = None

    @field_validator("remind_at")
    @classmethod
    def remind_at_utc(cls, v):
        return _as_utc(v)


# ---- Family ----

class FamilyMemberCreate(CamelModel):
    name: str = Field(..., min_length=1)
    relation: str = Field(..., min_length=1)
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None


# ---- Users / admin ----

class UserRegister(CamelModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6, max_length=72)
    gender: Optional[Gender] = None
    phone_number: Optional[str] = None
    expo_push_token: Optional[str] = None


class UserLogin(CamelModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class PushTokenUpdate(CamelModel):
    expo_push_token: Optional[str] = None


class UserStatusUpdate(CamelModel):
    status: UserStatus


class BroadcastRequest(CamelModel):
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    role: NotificationAudience = NotificationAudience.ALL
    user_id: Optional[str] = None
    scheduled_at: Optional[datetime] = None

    @field_validator("scheduled_at")
    @classmethod
    def scheduled_at_utc(cls, v):
        return _as_utc(v)


# ---- Health ----

class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    uptime_seconds: float
