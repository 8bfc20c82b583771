from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from loadprobe.metrics import MetricsSnapshot

FIRST_ERRORS = 5
ERROR_PREVIEW_CHARS = 100


@dataclass(frozen=True, slots=True)
class Report:
    total_requests: int
    successful_requests: int
    failed_requests: int
    rate_limit_errors: int
    other_errors: int
    total_duration_ms: float
    avg_duration_ms: float
    p50_ms: float
    p95_ms: float
    p99_ms: float
    throughput_per_sec: float
    success_rate_pct: float
    failure_rate_pct: float
    first_errors: tuple[str, ...]


def nearest_rank(sorted_values: np.ndarray, fraction: float) -> float:
    """Value at ``floor(len * fraction)``; 0 when that index is past the end.

    No interpolation, so results stay comparable with earlier runs.
    """
    index = math.floor(len(sorted_values) * fraction)
    if index >= len(sorted_values):
        return 0.0
    return float(sorted_values[index])


def build_report(metrics: MetricsSnapshot, total_duration_ms: float | None = None) -> Report:
    if total_duration_ms is None:
        total_duration_ms = metrics.total_duration_ms
    durations = np.sort(np.asarray(metrics.request_durations, dtype=float))
    avg = float(durations.mean()) if durations.size else 0.0
    total = metrics.total_requests
    if total_duration_ms > 0:
        throughput = total / (total_duration_ms / 1000.0)
    else:
        throughput = 0.0
    return Report(
        total_requests=total,
        successful_requests=metrics.successful_requests,
        failed_requests=metrics.failed_requests,
        rate_limit_errors=metrics.rate_limit_errors,
        other_errors=metrics.other_errors,
        total_duration_ms=float(total_duration_ms),
        avg_duration_ms=avg,
        p50_ms=nearest_rank(durations, 0.50),
        p95_ms=nearest_rank(durations, 0.95),
        p99_ms=nearest_rank(durations, 0.99),
        throughput_per_sec=throughput,
        success_rate_pct=_pct(metrics.successful_requests, total),
        failure_rate_pct=_pct(metrics.failed_requests, total),
        first_errors=tuple(e.message[:ERROR_PREVIEW_CHARS] for e in metrics.errors[:FIRST_ERRORS]),
    )


def _pct(part: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return part / total * 100.0
