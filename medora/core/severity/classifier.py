"""
Severity Classifier

Maps a metric reading to a severity label using static per-metric bands.

Bands (inclusive upper bounds unless noted):

    bloodSugar     Low < 70    Normal <= 140   High <= 200   else Critical
    bloodPressure  Low < 90    Normal <= 120   High <= 180   else Critical
    cholesterol    Low < 150   Normal <= 200   High <= 250   else Critical

Absent values and unknown metric types classify as N/A. Stateless; safe to
call from any number of concurrent requests.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from .extraction import ExtractedMetrics, parse_blood_pressure


class MetricType(str, Enum):
    """Physiological measurement categories with a band table."""
    BLOOD_SUGAR    = "bloodSugar"
    BLOOD_PRESSURE = "bloodPressure"
    CHOLESTEROL    = "cholesterol"


class SeverityLabel(str, Enum):
    LOW            = "Low"
    NORMAL         = "Normal"
    HIGH           = "High"
    CRITICAL       = "Critical"
    NOT_AVAILABLE  = "N/A"


class SeverityBand(NamedTuple):
    """Values up to ``upper`` (inclusive when ``inclusive``) get ``label``."""
    upper: float
    label: SeverityLabel
    inclusive: bool = True

    def contains(self, value: float) -> bool:
        return value <= self.upper if self.inclusive else value < self.upper


# ── Registry: metric type → ordered bands ────────────────────────────────────
# Evaluated top to bottom; a value past the last band is Critical.
_SEVERITY_BANDS: Dict[MetricType, List[SeverityBand]] = {
    MetricType.BLOOD_SUGAR: [
        SeverityBand(70,  SeverityLabel.LOW, inclusive=False),
        SeverityBand(140, SeverityLabel.NORMAL),
        SeverityBand(200, SeverityLabel.HIGH),
    ],
    MetricType.BLOOD_PRESSURE: [
        SeverityBand(90,  SeverityLabel.LOW, inclusive=False),
        SeverityBand(120, SeverityLabel.NORMAL),
        SeverityBand(180, SeverityLabel.HIGH),
    ],
    MetricType.CHOLESTEROL: [
        SeverityBand(150, SeverityLabel.LOW, inclusive=False),
        SeverityBand(200, SeverityLabel.NORMAL),
        SeverityBand(250, SeverityLabel.HIGH),
    ],
}

_ABOVE_ALL_BANDS = SeverityLabel.CRITICAL


def _resolve_type(metric_type: Any) -> Optional[MetricType]:
    try:
        return MetricType(metric_type)
    except ValueError:
        return None


def classify(value: Optional[float], metric_type: Any) -> SeverityLabel:
    """
    Classify a single reading.

    Args:
        value: Numeric reading, or None when nothing was measured.
        metric_type: A MetricType or its string tag (e.g. "bloodSugar").

    Returns:
        The SeverityLabel. Never raises: absent values and unrecognised
        types both give N/A.
    """
    if value is None:
        return SeverityLabel.NOT_AVAILABLE

    resolved = _resolve_type(metric_type)
    if resolved is None:
        return SeverityLabel.NOT_AVAILABLE

    for band in _SEVERITY_BANDS[resolved]:
        if band.contains(value):
            return band.label
    return _ABOVE_ALL_BANDS


def classify_metrics(metrics: ExtractedMetrics) -> Dict[MetricType, SeverityLabel]:
    """
    Classify every tracked metric of a report.

    Blood pressure is stored as "systolic/diastolic" text; the systolic
    component is what gets classified. Unparseable readings give N/A.
    """
    systolic = None
    if metrics.blood_pressure is not None:
        parsed = parse_blood_pressure(metrics.blood_pressure)
        if parsed is not None:
            systolic = parsed[0]

    return {
        MetricType.BLOOD_SUGAR: classify(metrics.blood_sugar, MetricType.BLOOD_SUGAR),
        MetricType.BLOOD_PRESSURE: classify(systolic, MetricType.BLOOD_PRESSURE),
        MetricType.CHOLESTEROL: classify(metrics.cholesterol, MetricType.CHOLESTEROL),
    }


def registered_metric_types() -> List[MetricType]:
    """Return which metric types have a band table."""
    return list(_SEVERITY_BANDS.keys())


def describe_bands() -> Dict[str, List[Dict[str, Any]]]:
    """
    Band tables in a JSON-friendly shape.

    Example output:
    {
        "bloodSugar": [
            {"label": "Low", "upper": 70, "inclusive": false},
            {"label": "Normal", "upper": 140, "inclusive": true},
            {"label": "High", "upper": 200, "inclusive": true},
            {"label": "Critical", "upper": null, "inclusive": true}
        ],
        ...
    }
    """
    table: Dict[str, List[Dict[str, Any]]] = {}
    for metric_type, bands in _SEVERITY_BANDS.items():
        rows = [
            {"label": b.label.value, "upper": b.upper, "inclusive": b.inclusive}
            for b in bands
        ]
        rows.append({"label": _ABOVE_ALL_BANDS.value, "upper": None, "inclusive": True})
        table[metric_type.value] = rows
    return table
