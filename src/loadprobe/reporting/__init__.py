from __future__ import annotations

from loadprobe.reporting.compare import Regression, compare_reports
from loadprobe.reporting.console import exit_code, render_report, verdict
from loadprobe.reporting.report import Report, build_report, nearest_rank

__all__ = [
    "Regression",
    "Report",
    "build_report",
    "compare_reports",
    "exit_code",
    "nearest_rank",
    "render_report",
    "verdict",
]
