from __future__ import annotations

import pytest

from loadprobe.config import ConfigurationError, RunConfig, RunMode, TargetConfig


def test_sustained_requires_rate_and_duration() -> None:
    with pytest.raises(ConfigurationError, match="target_rate is required"):
        RunConfig(mode=RunMode.SUSTAINED, duration_sec=5)
    with pytest.raises(ConfigurationError, match="duration_sec must be positive"):
        RunConfig(mode=RunMode.SUSTAINED, target_rate=5, duration_sec=0)


def test_burst_requires_size() -> None:
    with pytest.raises(ConfigurationError):
        RunConfig(mode=RunMode.BURST)
    assert RunConfig(mode=RunMode.BURST, burst_size=100).expected_requests() == 100


def test_paced_requires_rate_and_count() -> None:
    with pytest.raises(ConfigurationError, match="count"):
        RunConfig(mode=RunMode.PACED, target_rate=2)


def test_interval_and_expected_requests() -> None:
    config = RunConfig(mode=RunMode.SUSTAINED, target_rate=20, duration_sec=3)
    assert config.interval_sec == 0.05
    assert config.expected_requests() == 60
    meta = config.to_metadata()
    assert meta["mode"] == "sustained"
    assert meta["expected_requests"] == 60


def test_configuration_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        TargetConfig(url="")


@pytest.mark.parametrize("rate", [float("nan"), float("inf"), True])
def test_rate_must_be_a_finite_number(rate: float) -> None:
    with pytest.raises(ConfigurationError, match="target_rate must be a finite number"):
        RunConfig(mode=RunMode.SUSTAINED, target_rate=rate, duration_sec=1)


def test_duration_must_be_finite() -> None:
    with pytest.raises(ConfigurationError, match="duration_sec"):
        RunConfig(mode=RunMode.SUSTAINED, target_rate=10, duration_sec=float("inf"))


@pytest.mark.parametrize("size", [0.5, 3.0, True, "10"])
def test_burst_size_must_be_an_integer(size: object) -> None:
    with pytest.raises(ConfigurationError, match="burst_size must be an integer"):
        RunConfig(mode=RunMode.BURST, burst_size=size)


def test_paced_count_must_be_an_integer() -> None:
    with pytest.raises(ConfigurationError, match="count must be an integer"):
        RunConfig(mode=RunMode.PACED, target_rate=2, count=2.5)
