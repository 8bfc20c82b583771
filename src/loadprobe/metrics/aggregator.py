from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

from loadprobe.metrics.classifier import classify_error, error_message
from loadprobe.metrics.models import ErrorKind, ErrorRecord, MetricsSnapshot


@dataclass(slots=True)
class Metrics:
    """Counters and samples for a single run.

    Completing operations call ``record_success``/``record_error`` concurrently.
    Each call holds the lock for the whole update so the counters and the two
    sequences always agree with each other.
    """

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    rate_limit_errors: int = 0
    other_errors: int = 0
    total_duration_ms: float | None = None
    request_durations: list[float] = field(default_factory=list)
    errors: list[ErrorRecord] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_success(self, duration_ms: float) -> None:
        with self._lock:
            self.total_requests += 1
            self.successful_requests += 1
            self.request_durations.append(duration_ms)

    def record_error(self, error: BaseException) -> ErrorKind:
        message = error_message(error)
        kind = classify_error(message)
        with self._lock:
            self.total_requests += 1
            self.failed_requests += 1
            if kind is ErrorKind.RATE_LIMIT:
                self.rate_limit_errors += 1
            else:
                self.other_errors += 1
            self.errors.append(ErrorRecord(message=message, timestamp=time.time()))
        return kind

    def finalize(self, total_duration_ms: float) -> None:
        with self._lock:
            if self.total_duration_ms is not None:
                msg = "Metrics already finalized"
                raise RuntimeError(msg)
            self.total_duration_ms = total_duration_ms

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            return MetricsSnapshot(
                total_requests=self.total_requests,
                successful_requests=self.successful_requests,
                failed_requests=self.failed_requests,
                rate_limit_errors=self.rate_limit_errors,
                other_errors=self.other_errors,
                total_duration_ms=self.total_duration_ms or 0.0,
                request_durations=tuple(self.request_durations),
                errors=tuple(self.errors),
            )
