"""
Metric Extraction

Pulls the three tracked metrics out of a lab-report transcript, e.g.

    "Fasting Blood Sugar: 112 mg/dL  Blood Pressure 128/84  Cholesterol: 190"

Matching is case-insensitive and takes the first occurrence of each metric.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

_BLOOD_SUGAR_RE    = re.compile(r"blood sugar[:\s]*(\d+(?:\.\d+)?)", re.IGNORECASE)
_BLOOD_PRESSURE_RE = re.compile(r"blood pressure[:\s]*(\d+\s*/\s*\d+)", re.IGNORECASE)
_CHOLESTEROL_RE    = re.compile(r"cholesterol[:\s]*(\d+(?:\.\d+)?)", re.IGNORECASE)
_BP_READING_RE     = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)\s*$")


@dataclass
class ExtractedMetrics:
    """Metrics found in a report. Absent metrics are None."""
    blood_sugar: Optional[float] = None
    blood_pressure: Optional[str] = None     # "systolic/diastolic"
    cholesterol: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.blood_sugar is None and self.blood_pressure is None and self.cholesterol is None

    @property
    def is_complete(self) -> bool:
        return None not in (self.blood_sugar, self.blood_pressure, self.cholesterol)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bloodSugar": self.blood_sugar,
            "bloodPressure": self.blood_pressure,
            "cholesterol": self.cholesterol,
        }


def parse_blood_pressure(reading: str) -> Optional[Tuple[float, float]]:
    """Split "120/80" into (120.0, 80.0). Returns None for anything else."""
    if not isinstance(reading, str):
        return None
    match = _BP_READING_RE.match(reading)
    if match is None:
        return None
    return float(match.group(1)), float(match.group(2))


def extract_health_metrics(text: Optional[str]) -> ExtractedMetrics:
    """Scan free text for blood sugar, blood pressure and cholesterol."""
    metrics = ExtractedMetrics()
    if not text:
        return metrics

    sugar = _BLOOD_SUGAR_RE.search(text)
    if sugar:
        metrics.blood_sugar = float(sugar.group(1))

    bp = _BLOOD_PRESSURE_RE.search(text)
    if bp:
        metrics.blood_pressure = re.sub(r"\s+", "", bp.group(1))

    chol = _CHOLESTEROL_RE.search(text)
    if chol:
        metrics.cholesterol = float(chol.group(1))

    return metrics
