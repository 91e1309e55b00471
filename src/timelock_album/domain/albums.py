"""Domain models for albums."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from timelock_album.domain.access import AccessDecision
from timelock_album.domain.photos import Photo, PhotoSummary


@dataclass(frozen=True)
class Album:
    """Represents an album row.

    ``unlock_at`` is ``None`` while the album is sealed and is set exactly
    once when the owner unseals it.
    """

    id: UUID
    owner_id: UUID
    title: str
    comment: str | None
    unlock_at: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class AlbumListing:
    """Album with photo summaries for dashboards."""

    album: Album
    access: AccessDecision
    photos: list[PhotoSummary] = field(default_factory=list)


@dataclass(frozen=True)
class AlbumView:
    """Album with its photos and the access decision computed at read time."""

    album: Album
    access: AccessDecision
    photos: list[Photo] = field(default_factory=list)


@dataclass(frozen=True)
class AlbumStats:
    """Album counts per access state."""

    total: int
    sealed: int
    unlocked: int
    expired: int
