"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from timelock_album.adapters.supabase_album_repository import parse_timestamp
from timelock_album.adapters.supabase_errors import wrap_store_errors
from timelock_album.domain.photos import Photo
from timelock_album.errors import StoreError
from timelock_album.services.photos import PhotoRepository

_PHOTO_COLUMNS = "id, album_id, file_path, file_name, file_size, caption, uploaded_at"


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo rows."""

    client: Client

    def create_photo(  # noqa: PLR0913
        self,
        album_id: UUID,
        storage_key: str,
        original_name: str,
        size_bytes: int,
        caption: str | None,
    ) -> Photo:
        """Create a photo row and return it."""
        with wrap_store_errors("create photo"):
            response = (
                self.client.table("photos")
                .insert(
                    {
                        "album_id": str(album_id),
                        "file_path": storage_key,
                        "file_name": original_name,
                        "file_size": size_bytes,
                        "caption": caption,
                    }
                )
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to create photo")
        return _parse_photo(response.data[0])

    def get_photo(self, photo_id: UUID) -> Photo | None:
        """Return a photo by id, if present."""
        with wrap_store_errors("get photo"):
            response = (
                self.client.table("photos")
                .select(_PHOTO_COLUMNS)
                .eq("id", str(photo_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_photo(response.data[0])

    def list_photos(self, album_id: UUID) -> list[Photo]:
        """Return an album's photos in upload order."""
        with wrap_store_errors("list photos"):
            response = (
                self.client.table("photos")
                .select(_PHOTO_COLUMNS)
                .eq("album_id", str(album_id))
                .order("uploaded_at", desc=False)
                .execute()
            )
        return [_parse_photo(row) for row in response.data or []]

    def update_caption(self, photo_id: UUID, caption: str | None) -> Photo:
        """Update a photo caption."""
        with wrap_store_errors("update caption"):
            response = (
                self.client.table("photos")
                .update({"caption": caption})
                .eq("id", str(photo_id))
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to update caption")
        return _parse_photo(response.data[0])

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo row."""
        with wrap_store_errors("delete photo"):
            self.client.table("photos").delete().eq("id", str(photo_id)).execute()

    def delete_album_photos(self, album_id: UUID) -> None:
        """Delete all photo rows of an album."""
        with wrap_store_errors("delete album photos"):
            self.client.table("photos").delete().eq("album_id", str(album_id)).execute()


def _parse_photo(row: dict[str, object]) -> Photo:
    return Photo(
        id=UUID(str(row["id"])),
        album_id=UUID(str(row["album_id"])),
        storage_key=str(row["file_path"]),
        original_name=str(row.get("file_name") or ""),
        size_bytes=int(row.get("file_size") or 0),
        caption=row.get("caption"),
        uploaded_at=parse_timestamp(row.get("uploaded_at")) or datetime.now(tz=UTC),
    )
