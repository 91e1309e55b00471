"""Access window rules for unsealed albums."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal

AccessStatus = Literal["sealed", "unlocked", "expired"]

SEALED: AccessStatus = "sealed"
UNLOCKED: AccessStatus = "unlocked"
EXPIRED: AccessStatus = "expired"

UNLOCK_WINDOW_MS = 24 * 60 * 60 * 1000
UNLOCK_WINDOW = timedelta(milliseconds=UNLOCK_WINDOW_MS)

_ONE_MS = timedelta(milliseconds=1)


@dataclass(frozen=True)
class AccessDecision:
    """Result of evaluating an album's unlock timestamp at a point in time."""

    can_access: bool
    status: AccessStatus
    time_remaining_ms: int | None = None


def evaluate_access(unlock_at: datetime | None, now: datetime) -> AccessDecision:
    """Return the access decision for ``unlock_at`` as seen at ``now``.

    The window is ``[unlock_at, unlock_at + 24h)``. A ``now`` earlier than
    ``unlock_at`` (clock skew) is treated as expired.
    """
    if unlock_at is None:
        return AccessDecision(can_access=False, status=SEALED)

    window_end = unlock_at + UNLOCK_WINDOW
    if unlock_at <= now < window_end:
        return AccessDecision(
            can_access=True,
            status=UNLOCKED,
            time_remaining_ms=(window_end - now) // _ONE_MS,
        )
    return AccessDecision(can_access=False, status=EXPIRED)


def format_time_remaining(time_remaining_ms: int) -> str:
    """Format a countdown as hours, minutes and seconds."""
    total_seconds = max(time_remaining_ms, 0) // 1000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}h {minutes:02d}m {seconds:02d}s"
