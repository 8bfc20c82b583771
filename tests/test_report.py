from __future__ import annotations

import numpy as np
from hypothesis import given, strategies as st

from loadprobe.metrics import Metrics
from loadprobe.reporting import build_report, nearest_rank


def _finalized(durations: list[float], errors: list[str] = (), total_ms: float = 1000.0):
    metrics = Metrics()
    for d in durations:
        metrics.record_success(d)
    for message in errors:
        metrics.record_error(RuntimeError(message))
    metrics.finalize(total_ms)
    return metrics.snapshot()


def test_nearest_rank_percentiles() -> None:
    report = build_report(_finalized([10, 20, 30, 40, 50]))
    assert report.p50_ms == 30
    assert report.p95_ms == 50
    assert report.p99_ms == 50


def test_percentiles_use_sorted_copy() -> None:
    snap = _finalized([50, 10, 40, 20, 30])
    report = build_report(snap)
    assert report.p50_ms == 30
    assert snap.request_durations == (50, 10, 40, 20, 30)


def test_empty_durations_report_zeros() -> None:
    report = build_report(_finalized([], errors=["connection refused"]))
    assert report.avg_duration_ms == 0
    assert (report.p50_ms, report.p95_ms, report.p99_ms) == (0, 0, 0)
    assert report.failure_rate_pct == 100.0
    assert report.success_rate_pct == 0.0


def test_index_past_end_is_zero() -> None:
    assert nearest_rank(np.array([1.0, 2.0]), 1.0) == 0.0
    assert nearest_rank(np.array([]), 0.5) == 0.0


def test_mixed_outcomes() -> None:
    snap = _finalized([10, 20, 30], errors=["rate limit exceeded", "internal error"], total_ms=2000.0)
    report = build_report(snap)
    assert report.total_requests == 5
    assert report.successful_requests == 3
    assert report.failed_requests == 2
    assert report.rate_limit_errors == 1
    assert report.other_errors == 1
    assert report.avg_duration_ms == 20
    assert report.throughput_per_sec == 2.5
    assert report.success_rate_pct == 60.0
    assert report.failure_rate_pct == 40.0


def test_reporting_is_idempotent() -> None:
    snap = _finalized([5, 1, 9, 3], errors=["429"])
    assert build_report(snap) == build_report(snap)


def test_first_errors_are_limited_and_truncated() -> None:
    errors = [f"{i}" + "x" * 150 for i in range(7)]
    report = build_report(_finalized([], errors=errors))
    assert len(report.first_errors) == 5
    assert all(len(message) == 100 for message in report.first_errors)
    assert report.first_errors[0].startswith("0")


def test_explicit_duration_overrides_snapshot() -> None:
    snap = _finalized([1.0, 1.0], total_ms=1000.0)
    assert build_report(snap, total_duration_ms=500.0).throughput_per_sec == 4.0


def test_zero_duration_and_no_requests() -> None:
    report = build_report(_finalized([], total_ms=0.0))
    assert report.throughput_per_sec == 0.0
    assert report.success_rate_pct == 0.0
    assert report.failure_rate_pct == 0.0


@given(st.lists(st.floats(min_value=0.0, max_value=1e6), min_size=1, max_size=300))
def test_percentiles_are_ordered_samples(durations: list[float]) -> None:
    report = build_report(_finalized(durations))
    assert report.p50_ms <= report.p95_ms <= report.p99_ms
    for value in (report.p50_ms, report.p95_ms, report.p99_ms):
        assert value in durations
