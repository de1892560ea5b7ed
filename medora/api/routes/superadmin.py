"""
Superadmin Endpoints

Platform-wide views over users, records and predictions plus broadcast
notifications. Every route is gated by ``require_role(Role.SUPERADMIN)``;
other callers get 403 "Access denied".
"""
import calendar
from collections import Counter
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from medora import config
from medora.api.auth import require_role
from medora.api.deps import get_notifier, get_store
from medora.core.access import Role
from medora.models.domain import Gender, Record, User, UserStatus, utcnow
from medora.models.schemas import BroadcastRequest, UserStatusUpdate
from medora.services import InMemoryStore, Notifier, paginate
from medora.utils import NotFoundError, get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/superadmin",
    tags=["Superadmin"],
    dependencies=[Depends(require_role(Role.SUPERADMIN))],
)

RECENT_USERS = 10
GROWTH_MONTHS = 6


def _months_ago(now: datetime, months: int) -> datetime:
    year, month0 = divmod(now.year * 12 + now.month - 1 - months, 12)
    day = min(now.day, calendar.monthrange(year, month0 + 1)[1])
    return now.replace(year=year, month=month0 + 1, day=day)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _get_user(store: InMemoryStore, user_id: str) -> User:
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found", resource="user", details={"id": user_id})
    return user


def _get_record(store: InMemoryStore, record_id: str) -> Record:
    record = store.get_record(record_id)
    if record is None:
        raise NotFoundError("Record not found", resource="record", details={"id": record_id})
    return record


def _record_with_owner(store: InMemoryStore, record: Record) -> dict:
    owner = store.get_user(record.user_id)
    data = record.to_dict()
    data["user"] = {"id": owner.id, "name": owner.name, "email": owner.email} if owner else None
    return data


# ── Dashboard ────────────────────────────────────────────────────────────────

@router.get("/dashboard/stats")
async def dashboard_stats(store: InMemoryStore = Depends(get_store)):
    users = store.list_users(role=Role.USER)
    genders = Counter(u.gender for u in users)
    since = _months_ago(utcnow(), GROWTH_MONTHS)
    growth = Counter(u.created_at.strftime("%Y-%m") for u in users if u.created_at >= since)

    return {
        "totalUsers": len(users),
        "genderDistribution": [{"label": g.value, "value": genders.get(g, 0)} for g in Gender],
        "userGrowth": [{"month": month, "count": growth[month]} for month in sorted(growth)],
        "totalRecords": len(store.list_records()),
        "flaggedRecords": sum(1 for r in store.list_records() if r.flagged),
        "totalPredictions": len(store.list_predictions()),
    }


@router.get("/dashboard/recent-users")
async def recent_users(store: InMemoryStore = Depends(get_store)):
    return [u.to_dict() for u in store.list_users(role=Role.USER)[:RECENT_USERS]]


# ── Users ────────────────────────────────────────────────────────────────────

@router.get("/users")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=100),
    search: str = Query(""),
    status: Optional[UserStatus] = Query(None),
    store: InMemoryStore = Depends(get_store),
):
    users = store.list_users(role=Role.USER, status=status, search=search)
    page_items, total, _ = paginate(users, page, limit)
    return {"users": [u.to_dict() for u in page_items], "totalCount": total}


@router.get("/users/{user_id}")
async def user_details(user_id: str, store: InMemoryStore = Depends(get_store)):
    user = _get_user(store, user_id)
    return {
        **user.to_dict(),
        "recordCount": len(store.list_records(user_id=user.id)),
        "predictionCount": len(store.list_predictions(user_id=user.id)),
    }


@router.put("/users/{user_id}/status")
async def update_user_status(user_id: str, request: UserStatusUpdate, store: InMemoryStore = Depends(get_store)):
    _get_user(store, user_id)
    user = store.set_user_status(user_id, request.status)
    return {"message": f"User status updated to {request.status.value}", "user": user.to_dict()}


@router.delete("/users/{user_id}")
async def delete_user(user_id: str, store: InMemoryStore = Depends(get_store)):
    _get_user(store, user_id)
    store.delete_user(user_id)
    return {"message": "User and related data deleted"}


@router.get("/users/{user_id}/records/count")
async def user_record_count(user_id: str, store: InMemoryStore = Depends(get_store)):
    _get_user(store, user_id)
    return {"count": len(store.list_records(user_id=user_id))}


@router.get("/users/{user_id}/predictions/count")
async def user_prediction_count(user_id: str, store: InMemoryStore = Depends(get_store)):
    _get_user(store, user_id)
    return {"count": len(store.list_predictions(user_id=user_id))}


# ── Records ──────────────────────────────────────────────────────────────────

@router.get("/records")
async def list_records(
    user_id: Optional[str] = Query(None, alias="userId"),
    category: Optional[str] = Query(None),
    date_from: Optional[datetime] = Query(None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(None, alias="dateTo"),
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=100),
    store: InMemoryStore = Depends(get_store),
):
    records = store.list_records(
        user_id=user_id,
        category=category,
        date_from=_as_utc(date_from),
        date_to=_as_utc(date_to),
    )
    page_items, total, pages = paginate(records, page, limit)
    return {
        "success": True,
        "message": "Records fetched successfully",
        "data": [_record_with_owner(store, r) for r in page_items],
        "total": total,
        "page": page,
        "pages": pages,
    }


@router.get("/records/{record_id}")
async def record_details(record_id: str, store: InMemoryStore = Depends(get_store)):
    return {"success": True, "data": _record_with_owner(store, _get_record(store, record_id))}


@router.get("/records/{record_id}/prediction")
async def record_prediction(record_id: str, store: InMemoryStore = Depends(get_store)):
    record = _get_record(store, record_id)
    prediction = store.get_prediction(record.id)
    if prediction is None:
        raise NotFoundError("Prediction result not found", resource="prediction", details={"recordId": record.id})
    return {"success": True, "message": "Prediction fetched successfully", "data": prediction.labels()}


@router.patch("/records/{record_id}/flag")
async def flag_record(record_id: str, store: InMemoryStore = Depends(get_store)):
    _get_record(store, record_id)
    record = store.flag_record(record_id)
    logger.info(f"Record {record_id} flagged as suspicious")
    return {"success": True, "message": "Record flagged as suspicious", "data": record.to_dict()}


@router.delete("/records/{record_id}")
async def delete_record(record_id: str, store: InMemoryStore = Depends(get_store)):
    _get_record(store, record_id)
    store.delete_record(record_id)
    return {"success": True, "message": "Record and related data deleted successfully"}


# ── Notifications ────────────────────────────────────────────────────────────

@router.post("/notifications/send", status_code=201)
async def send_notification(
    request: BroadcastRequest,
    store: InMemoryStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
):
    if request.user_id is not None:
        _get_user(store, request.user_id)
        notification = await notifier.notify_user(
            request.user_id, request.title, request.message, scheduled_at=request.scheduled_at
        )
    else:
        notification = await notifier.broadcast(
            request.title, request.message, role=request.role, scheduled_at=request.scheduled_at
        )
    return {"message": "Notification sent", "notification": notification.to_dict()}


@router.get("/notifications/history")
async def notification_history(store: InMemoryStore = Depends(get_store)):
    return [n.to_dict() for n in store.list_broadcasts()]


@router.delete("/notifications/{notification_id}")
async def delete_notification(notification_id: str, store: InMemoryStore = Depends(get_store)):
    if not store.delete_notification(notification_id):
        raise NotFoundError("Notification not found", resource="notification", details={"id": notification_id})
    return {"message": "Notification deleted"}
