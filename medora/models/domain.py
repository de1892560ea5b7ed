"""
Domain Entities

Plain dataclasses held by the in-memory store. Each entity knows how to
serialise itself for API responses via ``to_dict()`` (camelCase keys, the
shape the mobile and admin clients consume).
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from medora.core.access import Role
from medora.core.severity import ExtractedMetrics, SeverityLabel


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class UserStatus(str, Enum):
    ACTIVE  = "active"
    PENDING = "pending"
    BLOCKED = "blocked"


class Gender(str, Enum):
    MALE   = "Male"
    FEMALE = "Female"
    OTHER  = "Other"


class RecordCategory(str, Enum):
    LAB_REPORT      = "Lab Report"
    PRESCRIPTION    = "Prescription"
    DOCTOR_NOTE     = "Doctor Note"
    IMAGING         = "Imaging"
    MEDICAL_EXPENSE = "Medical Expense"


class ReminderType(str, Enum):
    MEDICATION  = "medication"
    APPOINTMENT = "appointment"
    LAB         = "lab"
    CHECKUP     = "checkup"
    CUSTOM      = "custom"


class NotificationAudience(str, Enum):
    USER       = "user"
    ADMIN      = "admin"
    SUPERADMIN = "superadmin"
    ALL        = "all"


class TipCategory(str, Enum):
    NUTRITION       = "nutrition"
    FITNESS         = "fitness"
    MENTAL_HEALTH   = "mental_health"
    PREVENTIVE_CARE = "preventive_care"


@dataclass
class User:
    name: str
    email: str
    role: Role = Role.USER
    status: UserStatus = UserStatus.ACTIVE
    gender: Optional[Gender] = None
    phone_number: Optional[str] = None
    expo_push_token: Optional[str] = None
    password_hash: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        # push token and password hash stay server-side
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "status": self.status.value,
            "gender": self.gender.value if self.gender else None,
            "phoneNumber": self.phone_number,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class Record:
    user_id: str
    category: RecordCategory
    description: str
    family_member: Optional[str] = None
    lab_name: Optional[str] = None
    condition: Optional[str] = None
    doctor: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    emergency_use: bool = False
    extracted_text: Optional[str] = None
    extracted_metrics: ExtractedMetrics = field(default_factory=ExtractedMetrics)
    flagged: bool = False
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "category": self.category.value,
            "description": self.description,
            "familyMember": self.family_member,
            "labName": self.lab_name,
            "condition": self.condition,
            "doctor": self.doctor,
            "tags": list(self.tags),
            "emergencyUse": self.emergency_use,
            "extractedText": self.extracted_text,
            "extractedMetrics": self.extracted_metrics.to_dict(),
            "flagged": self.flagged,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class Prediction:
    record_id: str
    user_id: str
    blood_sugar: SeverityLabel = SeverityLabel.NOT_AVAILABLE
    blood_pressure: SeverityLabel = SeverityLabel.NOT_AVAILABLE
    cholesterol: SeverityLabel = SeverityLabel.NOT_AVAILABLE
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def labels(self) -> Dict[str, str]:
        return {
            "bloodSugar": self.blood_sugar.value,
            "bloodPressure": self.blood_pressure.value,
            "cholesterol": self.cholesterol.value,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "recordId": self.record_id,
            "userId": self.user_id,
            **self.labels(),
            "createdAt": _iso(self.created_at),
        }


@dataclass
class Reminder:
    user_id: str
    title: str
    message: str
    remind_at: datetime
    type: ReminderType = ReminderType.CUSTOM
    is_completed: bool = False
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "message": self.message,
            "type": self.type.value,
            "remindAt": _iso(self.remind_at),
            "date": self.remind_at.date().isoformat(),
            "time": self.remind_at.strftime("%H:%M"),
            "isCompleted": self.is_completed,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class Notification:
    title: str
    message: str
    user_id: Optional[str] = None
    role: Optional[NotificationAudience] = None
    is_read: bool = False
    scheduled_at: Optional[datetime] = None
    reminder_id: Optional[str] = None
    # broadcasts (user_id None) track read / dismissed state per recipient
    read_by: Set[str] = field(default_factory=set)
    dismissed_by: Set[str] = field(default_factory=set)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_broadcast(self) -> bool:
        return self.user_id is None

    def is_read_by(self, user_id: str) -> bool:
        return user_id in self.read_by if self.is_broadcast else self.is_read

    def is_due(self, now: datetime) -> bool:
        return self.scheduled_at is None or self.scheduled_at <= now

    def to_dict(self, viewer: Optional[str] = None) -> Dict[str, Any]:
        """``viewer`` resolves ``isRead`` for that user; without it broadcasts report their shared flag."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "message": self.message,
            "role": self.role.value if self.role else None,
            "isRead": self.is_read_by(viewer) if viewer is not None else self.is_read,
            "scheduledAt": _iso(self.scheduled_at),
            "reminderId": self.reminder_id,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class WellnessTip:
    title: str
    content: str
    category: TipCategory
    tags: List[str] = field(default_factory=list)
    source: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category.value,
            "tags": list(self.tags),
            "source": self.source,
        }


@dataclass
class FamilyMember:
    user_id: str
    name: str
    relation: str
    date_of_birth: Optional[date] = None
    notes: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "relation": self.relation,
            "dateOfBirth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "notes": self.notes,
            "createdAt": _iso(self.created_at),
        }
