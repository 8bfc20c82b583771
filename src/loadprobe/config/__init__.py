from __future__ import annotations

from loadprobe.config.models import ConfigurationError, RunConfig, RunMode, TargetConfig

__all__ = [
    "ConfigurationError",
    "RunConfig",
    "RunMode",
    "TargetConfig",
]
