"""Photo uploads and photo row/blob lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Protocol
from uuid import UUID, uuid4

from timelock_album.domain.photos import Photo, PhotoFile
from timelock_album.errors import (
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from timelock_album.domain.albums import Album
    from timelock_album.services.albums import AlbumService

_logger = logging.getLogger(__name__)

MAX_PHOTO_BYTES = 10 * 1024 * 1024
MAX_BATCH_FILES = 10
ALLOWED_MIME_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class PhotoRepository(Protocol):
    """Persistence interface for photo rows."""

    def create_photo(  # noqa: PLR0913
        self,
        album_id: UUID,
        storage_key: str,
        original_name: str,
        size_bytes: int,
        caption: str | None,
    ) -> Photo:
        """Create a photo row and return it."""

    def get_photo(self, photo_id: UUID) -> Photo | None:
        """Return a photo by id, if present."""

    def list_photos(self, album_id: UUID) -> list[Photo]:
        """Return an album's photos, oldest upload first."""

    def update_caption(self, photo_id: UUID, caption: str | None) -> Photo:
        """Update the caption and return the photo."""

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo row."""

    def delete_album_photos(self, album_id: UUID) -> None:
        """Delete every photo row of an album."""


class BlobStore(Protocol):
    """Interface for photo binary storage."""

    def put(self, key: str, content: bytes, content_type: str) -> str:
        """Store bytes under ``key`` and return the stored key."""

    def signed_url(self, key: str, ttl_seconds: int) -> str:
        """Return a time-limited URL for ``key``."""

    def remove(self, keys: list[str]) -> None:
        """Remove stored objects."""


def validate_photo_file(size_bytes: int, mime_type: str) -> None:
    """Reject files that are empty, larger than 10 MiB or not an allowed image."""
    if size_bytes <= 0:
        raise ValidationError("File is empty.")
    if size_bytes > MAX_PHOTO_BYTES:
        raise ValidationError("File size must be 10MB or less.")
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationError("Only JPEG, PNG and WebP images can be uploaded.")


def build_storage_key(
    owner_id: UUID, album_id: UUID, file_name: str, mime_type: str
) -> str:
    """Return a unique ``owner/album/uuid.ext`` key for a new blob."""
    extension = PurePosixPath(file_name).suffix.lstrip(".").lower()
    if not extension:
        extension = ALLOWED_MIME_TYPES.get(mime_type, "bin")
    return f"{owner_id}/{album_id}/{uuid4()}.{extension}"


@dataclass
class PhotoService:
    """Service for photo uploads, captions and removal."""

    album_service: AlbumService
    photo_repository: PhotoRepository
    blob_store: BlobStore
    signed_url_ttl_seconds: int = 60 * 60

    def upload(  # noqa: PLR0913
        self,
        owner: UUID | None,
        album_id: UUID,
        file_bytes: bytes,
        file_name: str,
        size_bytes: int,
        mime_type: str,
        caption: str | None = None,
    ) -> Photo:
        """Upload a photo into a sealed album."""
        album = self._sealed_album(owner, album_id)
        validate_photo_file(size_bytes, mime_type)
        return self._store(
            album,
            PhotoFile(
                content=file_bytes,
                file_name=file_name,
                size_bytes=size_bytes,
                mime_type=mime_type,
            ),
            caption,
        )

    def open_batch(self, owner: UUID | None, album_id: UUID, count: int) -> Album:
        """Resolve the sealed target album and check the batch size.

        Ownership and seal state are checked before the batch itself, so
        callers can run this before reading any file content.
        """
        album = self._sealed_album(owner, album_id)
        if count < 1:
            raise ValidationError("Select at least one photo.")
        if count > MAX_BATCH_FILES:
            raise ValidationError(
                f"At most {MAX_BATCH_FILES} photos can be uploaded at once."
            )
        return album

    def upload_many(
        self, owner: UUID | None, album_id: UUID, files: Sequence[PhotoFile]
    ) -> list[Photo]:
        """Upload a batch of photos after validating all of them."""
        album = self.open_batch(owner, album_id, len(files))
        for photo_file in files:
            try:
                validate_photo_file(photo_file.size_bytes, photo_file.mime_type)
            except ValidationError as exc:
                raise ValidationError(f"{photo_file.file_name}: {exc}") from exc
        return [self._store(album, photo_file, None) for photo_file in files]

    def delete(self, owner: UUID | None, photo_id: UUID) -> None:
        """Delete a photo row, then its blob on a best-effort basis."""
        photo = self._owned_photo(owner, photo_id)
        self.photo_repository.delete_photo(photo.id)
        _logger.info("Photo deleted: photo_id=%s", photo.id)
        try:
            self.blob_store.remove([photo.storage_key])
        except StoreError:
            _logger.warning(
                "Blob cleanup failed after photo delete: key=%s",
                photo.storage_key,
                exc_info=True,
            )

    def update_caption(
        self, owner: UUID | None, photo_id: UUID, caption: str | None
    ) -> Photo:
        """Update a photo caption in any access state."""
        photo = self._owned_photo(owner, photo_id)
        return self.photo_repository.update_caption(photo.id, caption)

    def list_by_album(self, owner: UUID | None, album_id: UUID) -> list[Photo]:
        """Return the album's photos in upload order."""
        album = self.album_service.get_owned(owner, album_id)
        photos = self.photo_repository.list_photos(album.id)
        return sorted(photos, key=lambda photo: photo.uploaded_at)

    def get_signed_url(self, storage_key: str, ttl_seconds: int | None = None) -> str:
        """Return a time-limited URL; callers re-request after it expires."""
        return self.blob_store.signed_url(
            storage_key,
            self.signed_url_ttl_seconds if ttl_seconds is None else ttl_seconds,
        )

    def _sealed_album(self, owner: UUID | None, album_id: UUID) -> Album:
        album = self.album_service.get_owned(owner, album_id)
        if album.unlock_at is not None:
            raise ConflictError("album already unsealed")
        return album

    def _owned_photo(self, owner: UUID | None, photo_id: UUID) -> Photo:
        photo = self.photo_repository.get_photo(photo_id)
        if photo is None:
            raise NotFoundError(
                f"Photo {photo_id} does not exist", public="photo not found"
            )
        try:
            self.album_service.get_owned(owner, photo.album_id)
        except NotFoundError as exc:
            raise type(exc)(str(exc), public="photo not found") from exc
        return photo

    def _store(self, album: Album, photo_file: PhotoFile, caption: str | None) -> Photo:
        key = build_storage_key(
            album.owner_id, album.id, photo_file.file_name, photo_file.mime_type
        )
        stored_key = self.blob_store.put(key, photo_file.content, photo_file.mime_type)
        try:
            photo = self.photo_repository.create_photo(
                album_id=album.id,
                storage_key=stored_key,
                original_name=photo_file.file_name,
                size_bytes=photo_file.size_bytes,
                caption=caption,
            )
        except Exception:
            _logger.warning(
                "Photo row insert failed, removing blob: key=%s", stored_key
            )
            try:
                self.blob_store.remove([stored_key])
            except StoreError:
                _logger.warning(
                    "Compensating blob removal failed: key=%s",
                    stored_key,
                    exc_info=True,
                )
            raise
        _logger.info("Photo uploaded: photo_id=%s album_id=%s", photo.id, album.id)
        return photo
