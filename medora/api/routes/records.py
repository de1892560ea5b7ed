"""
Medical record endpoints for the signed-in user.

Creating a record with a report transcript extracts the tracked metrics and
runs a severity prediction straight away.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from medora.api.auth import get_current_user
from medora.api.deps import get_prediction_service, get_store
from medora.core.severity import extract_health_metrics
from medora.models.domain import Record, User
from medora.models.schemas import RecordCreate
from medora.services import InMemoryStore, PredictionService
from medora.utils import ForbiddenError, NotFoundError, get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/records", tags=["Records"])

# Response keys for /counts
_COUNT_KEYS = {
    "Lab Report": "labReports",
    "Prescription": "prescription",
    "Doctor Note": "doctorNotes",
    "Imaging": "imaging",
    "Medical Expense": "medicalExpense",
}


def _owned_record(store: InMemoryStore, record_id: str, user: User) -> Record:
    record = store.get_record(record_id)
    if record is None:
        raise NotFoundError("Record not found", resource="record", details={"id": record_id})
    if record.user_id != user.id:
        raise ForbiddenError("Unauthorized access", details={"id": record_id})
    return record


@router.post("", status_code=201)
async def create_record(
    request: RecordCreate,
    user: User = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
    service: PredictionService = Depends(get_prediction_service),
):
    record = store.add_record(Record(
        user_id=user.id,
        category=request.category,
        description=request.description,
        family_member=request.family_member,
        lab_name=request.lab_name,
        condition=request.condition,
        doctor=request.doctor,
        tags=request.tags,
        emergency_use=request.emergency_use,
        extracted_text=request.extracted_text,
        extracted_metrics=extract_health_metrics(request.extracted_text),
    ))
    logger.info(f"Record {record.id} ({record.category.value}) created for user {user.id}")

    prediction = None
    if not record.extracted_metrics.is_empty:
        prediction = await service.predict_for_record(record)

    return {
        "message": "Record uploaded successfully",
        "record": record.to_dict(),
        "prediction": prediction.labels() if prediction else None,
    }


@router.get("")
async def list_records(
    category: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
):
    return [r.to_dict() for r in store.list_records(user_id=user.id, category=category)]


@router.get("/counts")
async def record_counts(user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    counts = store.count_records_by_category(user_id=user.id)
    return {_COUNT_KEYS[category.value]: n for category, n in counts.items()}


@router.get("/latest-metrics")
async def latest_metrics(user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    for record in store.list_records(user_id=user.id):
        if not record.extracted_metrics.is_empty:
            return {"recordId": record.id, **record.extracted_metrics.to_dict()}
    raise NotFoundError("No extracted metrics found", resource="record")


@router.get("/{record_id}")
async def get_record(record_id: str, user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return _owned_record(store, record_id, user).to_dict()


@router.get("/{record_id}/prediction")
async def get_record_prediction(
    record_id: str,
    user: User = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
):
    record = _owned_record(store, record_id, user)
    prediction = store.get_prediction(record.id)
    if prediction is None:
        raise NotFoundError("Prediction result not found", resource="prediction", details={"recordId": record.id})
    return prediction.to_dict()


@router.delete("/{record_id}")
async def delete_record(record_id: str, user: User = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    record = _owned_record(store, record_id, user)
    store.delete_record(record.id)
    return {"message": "Record deleted successfully"}
