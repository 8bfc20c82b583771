from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable

from loadprobe.config import RunConfig, RunMode
from loadprobe.loadgen.invoker import invoke
from loadprobe.loadgen.operations import Operation
from loadprobe.metrics import Metrics, MetricsSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunResult:
    run_id: str
    config: RunConfig
    metrics: MetricsSnapshot
    dispatched: int
    started_at: float
    finished_at: float


ProgressCallback = Callable[[int, int], Awaitable[None]]


def _new_run_id() -> str:
    return uuid.uuid4().hex


async def run_load(
    config: RunConfig,
    operation: Operation,
    progress: ProgressCallback | None = None,
) -> RunResult:
    """Drive ``operation`` according to ``config`` and return the settled metrics.

    The total duration is only recorded after every dispatched operation has
    settled, so the snapshot in the result is final.
    """
    run_id = config.run_id or _new_run_id()
    metrics = Metrics()
    logger.info(
        "Starting %s run %s (expected %d requests)",
        config.mode.value,
        run_id,
        config.expected_requests(),
    )
    started_at = time.time()
    started_mono = time.perf_counter()
    if config.mode is RunMode.BURST:
        dispatched = await _burst(config, operation, metrics, progress)
    elif config.mode is RunMode.PACED:
        dispatched = await _paced(config, operation, metrics, progress, started_mono)
    else:
        dispatched = await _sustained(config, operation, metrics, progress, started_mono)
    metrics.finalize((time.perf_counter() - started_mono) * 1000.0)
    snapshot = metrics.snapshot()
    logger.info(
        "Run %s finished: %d ok, %d failed (%d rate limited)",
        run_id,
        snapshot.successful_requests,
        snapshot.failed_requests,
        snapshot.rate_limit_errors,
    )
    return RunResult(
        run_id=run_id,
        config=config,
        metrics=snapshot,
        dispatched=dispatched,
        started_at=started_at,
        finished_at=time.time(),
    )


async def _sustained(
    config: RunConfig,
    operation: Operation,
    metrics: Metrics,
    progress: ProgressCallback | None,
    started_mono: float,
) -> int:
    interval = config.interval_sec
    deadline = config.duration_sec
    expected = config.expected_requests()
    every = _progress_every(config)
    tasks: list[asyncio.Task[bool]] = []
    while time.perf_counter() - started_mono < deadline:
        iteration_start = time.perf_counter()
        tasks.append(asyncio.create_task(invoke(operation, metrics)))
        if len(tasks) % every == 0:
            await _report_progress(progress, len(tasks), expected, started_mono)
        # Lost time is not made up: slow iterations lower the achieved rate.
        await _sleep(interval - (time.perf_counter() - iteration_start))
    await _drain(tasks)
    return len(tasks)


async def _burst(
    config: RunConfig,
    operation: Operation,
    metrics: Metrics,
    progress: ProgressCallback | None,
) -> int:
    size = int(config.burst_size)
    tasks = [asyncio.create_task(invoke(operation, metrics)) for _ in range(size)]
    if progress:
        await progress(size, size)
    await _drain(tasks)
    return size


async def _paced(
    config: RunConfig,
    operation: Operation,
    metrics: Metrics,
    progress: ProgressCallback | None,
    started_mono: float,
) -> int:
    interval = config.interval_sec
    count = int(config.count)
    every = _progress_every(config)
    for i in range(count):
        iteration_start = time.perf_counter()
        await invoke(operation, metrics)
        if (i + 1) % every == 0:
            await _report_progress(progress, i + 1, count, started_mono)
        if i < count - 1:
            await _sleep(interval - (time.perf_counter() - iteration_start))
    return count


async def _drain(tasks: list[asyncio.Task[bool]]) -> None:
    if not tasks:
        return
    pending = sum(1 for task in tasks if not task.done())
    logger.info("Waiting for %d pending requests...", pending)
    await asyncio.gather(*tasks)


async def _report_progress(
    progress: ProgressCallback | None,
    dispatched: int,
    expected: int,
    started_mono: float,
) -> None:
    elapsed = int(time.perf_counter() - started_mono)
    logger.info("Progress: %d requests sent (%ds elapsed)", dispatched, elapsed)
    if progress:
        await progress(dispatched, expected)


def _progress_every(config: RunConfig) -> int:
    return max(1, int(config.target_rate * config.progress_interval_sec))


async def _sleep(delay: float) -> None:
    if delay > 0:
        await asyncio.sleep(delay)
    else:
        # Yield so in-flight operations can make progress.
        await asyncio.sleep(0)
