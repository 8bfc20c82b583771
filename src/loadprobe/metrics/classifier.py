from __future__ import annotations

from loadprobe.metrics.models import ErrorKind

RATE_LIMIT_MARKERS = ("rate", "limit", "429", "too many")


def classify_error(message: str) -> ErrorKind:
    """Classify a failure by sniffing its rendered message.

    Matching is case-insensitive substring search; anything that does not look
    like throttling is ``ErrorKind.OTHER``.
    """
    lowered = message.lower()
    if any(marker in lowered for marker in RATE_LIMIT_MARKERS):
        return ErrorKind.RATE_LIMIT
    return ErrorKind.OTHER


def error_message(error: BaseException) -> str:
    return str(error) or type(error).__name__
