from __future__ import annotations

from loadprobe.metrics import Metrics
from loadprobe.reporting import build_report, exit_code, render_report, verdict


def _snapshot(successes: int, errors: list[str]):
    metrics = Metrics()
    for _ in range(successes):
        metrics.record_success(12.5)
    for message in errors:
        metrics.record_error(RuntimeError(message))
    metrics.finalize(1000.0)
    return metrics.snapshot()


def test_exit_code_clean_run() -> None:
    snap = _snapshot(3, [])
    assert exit_code(snap) == 0
    assert verdict(snap) == "All requests completed successfully"


def test_exit_code_rate_limited() -> None:
    snap = _snapshot(3, ["429 Too Many Requests"])
    assert exit_code(snap) == 1
    assert verdict(snap).startswith("RATE LIMIT ERRORS DETECTED")


def test_exit_code_other_failures() -> None:
    snap = _snapshot(3, ["connection refused"])
    assert exit_code(snap) == 1
    assert verdict(snap).startswith("SOME REQUESTS FAILED")


def test_render_report_lines() -> None:
    report = build_report(_snapshot(3, ["connection refused"]))
    text = render_report(report, "Burst: 4 reads")
    assert "========== Burst: 4 reads ==========" in text
    assert "Successful: 3 (75.0%)" in text
    assert "Failed: 1 (25.0%)" in text
    assert "  - Average: 12.50ms" in text
    assert "Throughput: 4.00 req/s" in text
    assert "  1. connection refused" in text


def test_render_report_without_errors_skips_section() -> None:
    text = render_report(build_report(_snapshot(2, [])), "clean")
    assert "First" not in text
