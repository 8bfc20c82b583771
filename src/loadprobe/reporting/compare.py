from __future__ import annotations

from dataclasses import dataclass

from loadprobe.reporting.report import Report


@dataclass(frozen=True, slots=True)
class Regression:
    metric: str
    delta_pct: float
    message: str


def compare_reports(base: Report, candidate: Report) -> list[Regression]:
    regressions: list[Regression] = []
    if base.total_requests == 0 or candidate.total_requests == 0:
        return regressions
    if base.p99_ms > 0:
        delta = (candidate.p99_ms - base.p99_ms) / base.p99_ms
        if delta > 0.2:
            regressions.append(
                Regression(
                    metric="p99_ms",
                    delta_pct=delta * 100,
                    message="p99 latency increased materially",
                )
            )
    if base.failure_rate_pct > 0:
        delta = (candidate.failure_rate_pct - base.failure_rate_pct) / base.failure_rate_pct
        if delta > 0.3:
            regressions.append(
                Regression(
                    metric="failure_rate_pct",
                    delta_pct=delta * 100,
                    message="error rate regression detected",
                )
            )
    elif candidate.failure_rate_pct > 0:
        regressions.append(
            Regression(
                metric="failure_rate_pct",
                delta_pct=float("inf"),
                message="failures appeared where the baseline had none",
            )
        )
    if base.throughput_per_sec > 0:
        delta = (base.throughput_per_sec - candidate.throughput_per_sec) / base.throughput_per_sec
        if delta > 0.2:
            regressions.append(
                Regression(
                    metric="throughput_per_sec",
                    delta_pct=delta * 100,
                    message="throughput regression detected",
                )
            )
    return regressions
