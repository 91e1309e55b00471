"""Request and response models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from timelock_album.domain.access import (
    AccessDecision,
    AccessStatus,
    format_time_remaining,
)
from timelock_album.domain.albums import Album, AlbumListing, AlbumStats
from timelock_album.domain.photos import Photo


class CreateAlbumRequest(BaseModel):
    """Payload for creating an album."""

    title: str


class UpdateAlbumRequest(BaseModel):
    """Partial album metadata update."""

    title: str | None = None
    comment: str | None = None


class UpdateCaptionRequest(BaseModel):
    """Caption update for a photo."""

    caption: str | None = None


class AccessOut(BaseModel):
    """Access decision as seen by the client."""

    can_access: bool
    status: AccessStatus
    time_remaining_ms: int | None = None
    time_remaining: str | None = None

    @classmethod
    def from_decision(cls, decision: AccessDecision) -> "AccessOut":
        return cls(
            can_access=decision.can_access,
            status=decision.status,
            time_remaining_ms=decision.time_remaining_ms,
            time_remaining=(
                format_time_remaining(decision.time_remaining_ms)
                if decision.time_remaining_ms is not None
                else None
            ),
        )


class PhotoOut(BaseModel):
    """Photo metadata, with a signed URL when the album is viewable."""

    id: UUID
    album_id: UUID
    original_name: str
    size_bytes: int
    caption: str | None
    uploaded_at: datetime
    url: str | None = None

    @classmethod
    def from_photo(cls, photo: Photo, url: str | None = None) -> "PhotoOut":
        return cls(
            id=photo.id,
            album_id=photo.album_id,
            original_name=photo.original_name,
            size_bytes=photo.size_bytes,
            caption=photo.caption,
            uploaded_at=photo.uploaded_at,
            url=url,
        )


class PhotoSummaryOut(BaseModel):
    """Photo entry in album listings."""

    id: UUID
    original_name: str


class AlbumOut(BaseModel):
    """Album metadata."""

    id: UUID
    title: str
    comment: str | None
    unlock_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_album(cls, album: Album) -> "AlbumOut":
        return cls(
            id=album.id,
            title=album.title,
            comment=album.comment,
            unlock_at=album.unlock_at,
            created_at=album.created_at,
            updated_at=album.updated_at,
        )


class AlbumListingOut(AlbumOut):
    """Album with access decision and photo summaries."""

    access: AccessOut
    photos: list[PhotoSummaryOut] = Field(default_factory=list)

    @classmethod
    def from_listing(cls, listing: AlbumListing) -> "AlbumListingOut":
        return cls(
            **AlbumOut.from_album(listing.album).model_dump(),
            access=AccessOut.from_decision(listing.access),
            photos=[
                PhotoSummaryOut(id=photo.id, original_name=photo.original_name)
                for photo in listing.photos
            ],
        )


class AlbumDetailOut(AlbumOut):
    """Album with access decision and photos."""

    access: AccessOut
    photo_count: int
    photos: list[PhotoOut] = Field(default_factory=list)


class AlbumStatsOut(BaseModel):
    """Album counts per access state."""

    total: int
    sealed: int
    unlocked: int
    expired: int

    @classmethod
    def from_stats(cls, stats: AlbumStats) -> "AlbumStatsOut":
        return cls(
            total=stats.total,
            sealed=stats.sealed,
            unlocked=stats.unlocked,
            expired=stats.expired,
        )
