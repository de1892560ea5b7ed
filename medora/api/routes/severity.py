"""
Severity endpoints: stateless classification plus the caller's latest
report prediction.
"""
from fastapi import APIRouter, Depends

from medora.api.auth import get_current_user
from medora.api.deps import get_prediction_service, get_store
from medora.core.severity import classify, describe_bands
from medora.models.domain import User
from medora.models.schemas import ClassifyRequest, ClassifyResponse
from medora.services import InMemoryStore, PredictionService
from medora.utils import NotFoundError, RecordValidationError

router = APIRouter(prefix="/api/severity", tags=["Severity"])


@router.post("/classify", response_model=ClassifyResponse)
async def classify_reading(request: ClassifyRequest):
    """Classify one reading. Unknown types and null values give "N/A"."""
    label = classify(request.value, request.type)
    return ClassifyResponse(type=request.type, value=request.value, severity=label.value)


@router.get("/thresholds")
async def list_thresholds():
    return {"thresholds": describe_bands()}


@router.get("/predict")
async def predict_latest(
    user: User = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
    service: PredictionService = Depends(get_prediction_service),
):
    """
    Severity of the caller's most recent report with extracted metrics.

    Reuses the stored prediction when there is one so that repeated calls
    do not raise duplicate alerts.
    """
    with_metrics = [r for r in store.list_records(user_id=user.id) if not r.extracted_metrics.is_empty]
    if not with_metrics:
        raise NotFoundError("No health data available", resource="record")

    latest = with_metrics[0]
    if not latest.extracted_metrics.is_complete:
        raise RecordValidationError(
            "Incomplete health data",
            field="extractedMetrics",
            details={"recordId": latest.id, "metrics": latest.extracted_metrics.to_dict()},
        )

    prediction = store.get_prediction(latest.id) or await service.predict_for_record(latest)
    return {"recordId": latest.id, "severity": prediction.labels()}
