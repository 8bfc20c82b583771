from __future__ import annotations

from loadprobe.metrics.aggregator import Metrics
from loadprobe.metrics.classifier import classify_error, error_message
from loadprobe.metrics.models import ErrorKind, ErrorRecord, MetricsSnapshot

__all__ = [
    "ErrorKind",
    "ErrorRecord",
    "Metrics",
    "MetricsSnapshot",
    "classify_error",
    "error_message",
]
