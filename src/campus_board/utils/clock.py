"""Wall-clock helpers."""

import time

DAY_MS = 24 * 60 * 60 * 1000


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)
