"""Album statistics by access state."""

from collections.abc import Iterable
from datetime import datetime

from timelock_album.domain.access import SEALED, UNLOCKED, evaluate_access
from timelock_album.domain.albums import Album, AlbumStats


def summarize_access(albums: Iterable[Album], now: datetime) -> AlbumStats:
    """Count albums per access state in a single pass."""
    total = sealed = unlocked = expired = 0
    for album in albums:
        total += 1
        status = evaluate_access(album.unlock_at, now).status
        if status == SEALED:
            sealed += 1
        elif status == UNLOCKED:
            unlocked += 1
        else:
            expired += 1
    return AlbumStats(total=total, sealed=sealed, unlocked=unlocked, expired=expired)
