"""
Severity Prediction Service

Classifies the metrics extracted from a record, stores one Prediction per
record and raises alert notifications for out-of-range readings.

Alert rules:
    bloodPressure  Low / High / Critical  -> "Blood Pressure Alert"
    bloodSugar     Low / High / Critical  -> "Blood Sugar Alert"
    cholesterol    High / Critical        -> "Cholesterol Alert"
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from medora.core.severity import MetricType, SeverityLabel, classify_metrics
from medora.models.domain import Prediction, Record
from medora.services.notifications import Notifier
from medora.services.store import InMemoryStore
from medora.utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AlertRule:
    labels: FrozenSet[SeverityLabel]
    title: str
    template: str       # formatted with label=<severity label>

    def message(self, label: SeverityLabel) -> str:
        return self.template.format(label=label.value)


_OUT_OF_RANGE = frozenset({SeverityLabel.LOW, SeverityLabel.HIGH, SeverityLabel.CRITICAL})

# Evaluated in this order; one alert per matching metric.
_ALERT_RULES: Dict[MetricType, AlertRule] = {
    MetricType.BLOOD_PRESSURE: AlertRule(
        _OUT_OF_RANGE,
        "Blood Pressure Alert",
        "Your blood pressure is {label}. Please consult a doctor.",
    ),
    MetricType.BLOOD_SUGAR: AlertRule(
        _OUT_OF_RANGE,
        "Blood Sugar Alert",
        "Your blood sugar is {label}. Monitor your diet.",
    ),
    MetricType.CHOLESTEROL: AlertRule(
        frozenset({SeverityLabel.HIGH, SeverityLabel.CRITICAL}),
        "Cholesterol Alert",
        "Your cholesterol level is {label}. Consider a healthier diet.",
    ),
}


class PredictionService:
    """Turns record metrics into stored predictions and alerts."""

    def __init__(self, store: InMemoryStore, notifier: Notifier):
        self.store = store
        self.notifier = notifier

    async def predict_for_record(self, record: Record) -> Prediction:
        """
        Classify a record's extracted metrics and persist the result.

        Any previous prediction for the record is replaced. Alerts are sent
        to the record owner for every metric matching an alert rule.
        """
        labels = classify_metrics(record.extracted_metrics)
        prediction = self.store.save_prediction(Prediction(
            record_id=record.id,
            user_id=record.user_id,
            blood_sugar=labels[MetricType.BLOOD_SUGAR],
            blood_pressure=labels[MetricType.BLOOD_PRESSURE],
            cholesterol=labels[MetricType.CHOLESTEROL],
        ))
        logger.info("Prediction saved", extra={"record_id": record.id, **prediction.labels()})

        for metric_type, rule in _ALERT_RULES.items():
            label = labels[metric_type]
            if label in rule.labels:
                await self.notifier.notify_user(record.user_id, rule.title, rule.message(label))
        return prediction

    def pending_records(self) -> List[Record]:
        """Records with extracted metrics but no prediction yet, newest first."""
        return [
            r for r in self.store.list_records()
            if not r.extracted_metrics.is_empty and self.store.get_prediction(r.id) is None
        ]

    async def run_pending(self) -> Optional[Prediction]:
        """Predict for the newest unprocessed record, if any."""
        pending = self.pending_records()
        if not pending:
            logger.info("No new extracted metrics awaiting prediction.")
            return None
        return await self.predict_for_record(pending[0])
