"""Album lifecycle: creation, unsealing, deletion and ownership checks."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol
from uuid import UUID

from timelock_album.domain.access import evaluate_access
from timelock_album.domain.albums import Album, AlbumListing, AlbumStats, AlbumView
from timelock_album.domain.photos import PhotoSummary
from timelock_album.errors import (
    AuthRequiredError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from timelock_album.services.clock import Clock, utc_now
from timelock_album.services.photos import BlobStore, PhotoRepository
from timelock_album.services.stats import summarize_access

_logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 500


class AlbumRepository(Protocol):
    """Persistence interface for album rows."""

    def create_album(self, owner_id: UUID, title: str) -> Album:
        """Create a sealed album and return it."""

    def get_album(self, album_id: UUID) -> Album | None:
        """Return an album by id regardless of owner, if present."""

    def list_albums(self, owner_id: UUID) -> list[Album]:
        """Return the owner's albums, newest first."""

    def update_album(
        self, album_id: UUID, owner_id: UUID, patch: dict[str, object]
    ) -> Album:
        """Apply a title/comment patch and return the updated album."""

    def mark_unsealed(
        self, album_id: UUID, owner_id: UUID, unlock_at: datetime
    ) -> Album | None:
        """Set ``unlock_at`` only if it is currently unset.

        Returns ``None`` when the guard did not match.
        """

    def delete_album(self, album_id: UUID, owner_id: UUID) -> None:
        """Delete an album row."""


def require_owner(owner: UUID | None) -> UUID:
    """Return the authenticated owner id or raise ``AuthRequiredError``."""
    if owner is None:
        raise AuthRequiredError
    return owner


@dataclass
class AlbumService:
    """Authoritative gate for album-level operations."""

    album_repository: AlbumRepository
    photo_repository: PhotoRepository
    blob_store: BlobStore
    clock: Clock = field(default=utc_now)

    def create(self, owner: UUID | None, title: str) -> Album:
        """Create a sealed album for the owner."""
        owner_id = require_owner(owner)
        cleaned = _clean_title(title)
        album = self.album_repository.create_album(owner_id, cleaned)
        _logger.info("Album created: album_id=%s owner=%s", album.id, owner_id)
        return album

    def list_by_owner(self, owner: UUID | None) -> list[AlbumListing]:
        """Return the owner's albums with photo summaries, newest first."""
        owner_id = require_owner(owner)
        albums = self.album_repository.list_albums(owner_id)
        now = self.clock()
        listings = []
        for album in sorted(albums, key=lambda item: item.created_at, reverse=True):
            photos = self.photo_repository.list_photos(album.id)
            listings.append(
                AlbumListing(
                    album=album,
                    access=evaluate_access(album.unlock_at, now),
                    photos=[
                        PhotoSummary(id=photo.id, original_name=photo.original_name)
                        for photo in photos
                    ],
                )
            )
        return listings

    def get_owned(self, owner: UUID | None, album_id: UUID) -> Album:
        """Return the album when it exists and belongs to the owner."""
        owner_id = require_owner(owner)
        album = self.album_repository.get_album(album_id)
        if album is None:
            raise NotFoundError(f"Album {album_id} does not exist")
        if album.owner_id != owner_id:
            raise ForbiddenError(f"Album {album_id} is not owned by {owner_id}")
        return album

    def get_by_id(self, owner: UUID | None, album_id: UUID) -> AlbumView:
        """Return album metadata, photos and the current access decision.

        Metadata is returned in every state; callers decide whether photo
        content may be shown from ``view.access.can_access``.
        """
        album = self.get_owned(owner, album_id)
        photos = self.photo_repository.list_photos(album.id)
        return AlbumView(
            album=album,
            access=evaluate_access(album.unlock_at, self.clock()),
            photos=photos,
        )

    def update_metadata(
        self,
        owner: UUID | None,
        album_id: UUID,
        title: str | None = None,
        comment: str | None = None,
    ) -> Album:
        """Update title and/or comment in any access state."""
        owner_id = require_owner(owner)
        patch: dict[str, object] = {}
        if title is not None:
            patch["title"] = _clean_title(title)
        if comment is not None:
            if len(comment) > MAX_COMMENT_LENGTH:
                raise ValidationError(
                    f"Comment must be at most {MAX_COMMENT_LENGTH} characters."
                )
            patch["comment"] = comment
        album = self.get_owned(owner_id, album_id)
        if not patch:
            return album
        return self.album_repository.update_album(album.id, owner_id, patch)

    def unseal(self, owner: UUID | None, album_id: UUID) -> Album:
        """Start the 24 hour viewing window. Allowed once per album."""
        owner_id = require_owner(owner)
        album = self.get_owned(owner_id, album_id)
        if album.unlock_at is not None:
            raise ConflictError("album already unsealed")
        unsealed = self.album_repository.mark_unsealed(
            album.id, owner_id, self.clock()
        )
        if unsealed is None:
            _logger.warning("Concurrent unseal rejected: album_id=%s", album.id)
            raise ConflictError("album already unsealed")
        _logger.info(
            "Album unsealed: album_id=%s unlock_at=%s",
            unsealed.id,
            unsealed.unlock_at.isoformat() if unsealed.unlock_at else None,
        )
        return unsealed

    def delete(self, owner: UUID | None, album_id: UUID) -> None:
        """Delete an album with its photo rows, then clean up blobs."""
        owner_id = require_owner(owner)
        album = self.get_owned(owner_id, album_id)
        photos = self.photo_repository.list_photos(album.id)
        if photos:
            self.photo_repository.delete_album_photos(album.id)
        self.album_repository.delete_album(album.id, owner_id)
        _logger.info("Album deleted: album_id=%s photos=%s", album.id, len(photos))
        if not photos:
            return
        try:
            self.blob_store.remove([photo.storage_key for photo in photos])
        except StoreError:
            _logger.warning(
                "Blob cleanup failed after album delete: album_id=%s",
                album.id,
                exc_info=True,
            )

    def compute_stats(self, owner: UUID | None) -> AlbumStats:
        """Return album counts per access state for the owner."""
        owner_id = require_owner(owner)
        albums = self.album_repository.list_albums(owner_id)
        return summarize_access(albums, self.clock())


def _clean_title(title: str) -> str:
    cleaned = title.strip()
    if not cleaned:
        raise ValidationError("Title must not be empty.")
    return cleaned
