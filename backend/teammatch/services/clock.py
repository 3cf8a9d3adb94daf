"""Clock — the single source of "now" for time-dependent decisions.

Invariants:
    - Always returns a timezone-aware UTC instant

Design Decisions:
    - Injected into services (default utc_now) so tests pin time instead of patching
      datetime
"""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def fixed_clock(instant: datetime) -> Clock:
    """Clock frozen at instant (must be timezone-aware)."""
    if instant.tzinfo is None:
        raise ValueError("fixed_clock requires a timezone-aware datetime")
    return lambda: instant
