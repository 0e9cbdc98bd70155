"""Delays between retry attempts."""

# Rate-limit schedule, clamped at the last entry
RATE_LIMIT_DELAYS: tuple[float, ...] = (5.0, 15.0, 30.0)

BASE_DELAY = 1.0
MAX_DELAY = 4.0

# Upper bound for a server-provided Retry-After
MAX_RETRY_AFTER = 60.0


def delay(attempt: int, rate_limited: bool = False) -> float:
    """
    Seconds to wait after a failed attempt.

    Args:
        attempt: Number of the attempt that just failed (1-indexed)
        rate_limited: Whether the failure was a 429

    Returns:
        5/15/30s for rate limits (clamped at 30s), otherwise 1/2/4s
    """
    attempt = max(attempt, 1)
    if rate_limited:
        return RATE_LIMIT_DELAYS[min(attempt, len(RATE_LIMIT_DELAYS)) - 1]
    return min(BASE_DELAY * 2 ** (attempt - 1), MAX_DELAY)


def parse_retry_after(value: str | None) -> float | None:
    """Numeric ``Retry-After`` header in seconds; dates are not supported."""
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    if seconds < 0:
        return None
    return min(seconds, MAX_RETRY_AFTER)
