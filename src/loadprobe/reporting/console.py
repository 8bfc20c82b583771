from __future__ import annotations

from loadprobe.metrics import MetricsSnapshot
from loadprobe.reporting.report import Report


def render_report(report: Report, title: str) -> str:
    lines = [
        f"========== {title} ==========",
        f"Total Requests: {report.total_requests}",
        f"Successful: {report.successful_requests} ({report.success_rate_pct:.1f}%)",
        f"Failed: {report.failed_requests} ({report.failure_rate_pct:.1f}%)",
        f"  - Rate Limit Errors: {report.rate_limit_errors}",
        f"  - Other Errors: {report.other_errors}",
        "",
        "Latency:",
        f"  - Average: {report.avg_duration_ms:.2f}ms",
        f"  - P50: {report.p50_ms:.2f}ms",
        f"  - P95: {report.p95_ms:.2f}ms",
        f"  - P99: {report.p99_ms:.2f}ms",
        f"Total Duration: {report.total_duration_ms:.2f}ms",
        f"Throughput: {report.throughput_per_sec:.2f} req/s",
    ]
    if report.first_errors:
        lines.append("")
        lines.append(f"First {len(report.first_errors)} Errors:")
        for i, message in enumerate(report.first_errors, start=1):
            lines.append(f"  {i}. {message}")
    lines.append("=" * 32)
    return "\n".join(lines)


def exit_code(metrics: MetricsSnapshot | Report) -> int:
    if metrics.rate_limit_errors == 0 and metrics.failed_requests == 0:
        return 0
    return 1


def verdict(metrics: MetricsSnapshot | Report) -> str:
    if metrics.rate_limit_errors > 0:
        return (
            "RATE LIMIT ERRORS DETECTED: the service could not handle the requested load "
            f"({metrics.rate_limit_errors} rate limit errors)"
        )
    if metrics.failed_requests > 0:
        return f"SOME REQUESTS FAILED ({metrics.failed_requests})"
    return "All requests completed successfully"
