from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping


class ConfigurationError(ValueError):
    """Raised for run setups that cannot start."""


class RunMode(str, Enum):
    SUSTAINED = "sustained"
    BURST = "burst"
    PACED = "paced"


@dataclass(frozen=True, slots=True)
class TargetConfig:
    url: str
    method: str = "POST"
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout_sec: float | None = None  # None keeps the transport default
    json_body: Any = None

    def __post_init__(self) -> None:
        if not self.url:
            msg = "target url is required"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class RunConfig:
    mode: RunMode
    target_rate: float | None = None
    duration_sec: float | None = None
    burst_size: int | None = None
    count: int | None = None
    progress_interval_sec: float = 10.0
    run_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    notes: str = ""

    def __post_init__(self) -> None:
        if self.mode is RunMode.SUSTAINED:
            _require_positive("target_rate", self.target_rate, self.mode)
            _require_positive("duration_sec", self.duration_sec, self.mode)
        elif self.mode is RunMode.BURST:
            _require_positive("burst_size", self.burst_size, self.mode, integer=True)
        elif self.mode is RunMode.PACED:
            _require_positive("target_rate", self.target_rate, self.mode)
            _require_positive("count", self.count, self.mode, integer=True)
        else:
            msg = f"Unsupported run mode: {self.mode}"
            raise ConfigurationError(msg)

    @property
    def interval_sec(self) -> float:
        if not self.target_rate:
            return 0.0
        return 1.0 / self.target_rate

    def expected_requests(self) -> int:
        if self.mode is RunMode.SUSTAINED:
            return int(self.target_rate * self.duration_sec)
        if self.mode is RunMode.BURST:
            return int(self.burst_size)
        return int(self.count)

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "run_id": self.run_id or "",
            "created_at": self.created_at.isoformat(),
            "mode": self.mode.value,
            "target_rate": self.target_rate,
            "duration_sec": self.duration_sec,
            "burst_size": self.burst_size,
            "count": self.count,
            "expected_requests": self.expected_requests(),
            "notes": self.notes,
        }


def _require_positive(name: str, value: float | None, mode: RunMode, integer: bool = False) -> None:
    if value is None:
        msg = f"{name} is required for {mode.value} runs"
        raise ConfigurationError(msg)
    if integer and (isinstance(value, bool) or not isinstance(value, int)):
        msg = f"{name} must be an integer for {mode.value} runs, got {value!r}"
        raise ConfigurationError(msg)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        msg = f"{name} must be a finite number for {mode.value} runs, got {value!r}"
        raise ConfigurationError(msg)
    if value <= 0:
        msg = f"{name} must be positive for {mode.value} runs, got {value}"
        raise ConfigurationError(msg)
