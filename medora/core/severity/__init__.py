"""
Severity Layer

Turns report text into metrics and metrics into severity labels.

Usage:
    from medora.core.severity import classify, extract_health_metrics

    classify(141, "bloodSugar")            # SeverityLabel.HIGH
    metrics = extract_health_metrics(text)
    labels = classify_metrics(metrics)
"""
from .classifier import (
    MetricType,
    SeverityLabel,
    SeverityBand,
    classify,
    classify_metrics,
    describe_bands,
    registered_metric_types,
)
from .extraction import ExtractedMetrics, extract_health_metrics, parse_blood_pressure

__all__ = [
    "MetricType",
    "SeverityLabel",
    "SeverityBand",
    "classify",
    "classify_metrics",
    "describe_bands",
    "registered_metric_types",
    "ExtractedMetrics",
    "extract_health_metrics",
    "parse_blood_pressure",
]
