from __future__ import annotations

import asyncio
import itertools
from typing import Any, Callable, Sequence

from loadprobe.config import ConfigurationError

# A unit of work: either returns an awaitable or the result itself.
Operation = Callable[[], Any]


def blocking(fn: Callable[[], Any]) -> Operation:
    """Wrap a blocking callable so it runs off the event loop."""

    async def call() -> Any:
        return await asyncio.to_thread(fn)

    return call


def rotate(operations: Sequence[Operation]) -> Operation:
    """Round-robin over ``operations``, one per dispatch."""
    if not operations:
        msg = "rotate() needs at least one operation"
        raise ConfigurationError(msg)
    picker = itertools.cycle(operations)

    def call() -> Any:
        return next(picker)()

    return call
