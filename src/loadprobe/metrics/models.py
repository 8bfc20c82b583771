from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    RATE_LIMIT = "rate_limit"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    message: str
    timestamp: float  # wall clock, epoch seconds


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    total_requests: int
    successful_requests: int
    failed_requests: int
    rate_limit_errors: int
    other_errors: int
    total_duration_ms: float
    request_durations: tuple[float, ...]
    errors: tuple[ErrorRecord, ...]
