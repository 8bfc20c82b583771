from __future__ import annotations

import inspect
import logging
import time

from loadprobe.loadgen.operations import Operation
from loadprobe.metrics import Metrics

logger = logging.getLogger(__name__)


async def invoke(operation: Operation, metrics: Metrics) -> bool:
    """Run one operation and record exactly one outcome.

    Returns ``True`` on success. Operation failures never propagate; only
    cancellation of the surrounding task does.
    """
    start_mono = time.perf_counter()
    try:
        result = operation()
        if inspect.isawaitable(result):
            await result
    except Exception as exc:
        kind = metrics.record_error(exc)
        logger.debug("Operation failed (%s): %r", kind.value, exc)
        return False
    metrics.record_success((time.perf_counter() - start_mono) * 1000.0)
    return True
