"""Supabase-backed album repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from timelock_album.adapters.supabase_errors import wrap_store_errors
from timelock_album.domain.albums import Album
from timelock_album.errors import StoreError
from timelock_album.services.albums import AlbumRepository

_ALBUM_COLUMNS = "id, user_id, title, comment, unlock_date, created_at, updated_at"


@dataclass
class SupabaseAlbumRepository(AlbumRepository):
    """Supabase implementation for album persistence."""

    client: Client

    def create_album(self, owner_id: UUID, title: str) -> Album:
        """Create a sealed album row and return it."""
        with wrap_store_errors("create album"):
            response = (
                self.client.table("albums")
                .insert({"user_id": str(owner_id), "title": title, "unlock_date": None})
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to create album")
        return _parse_album(response.data[0])

    def get_album(self, album_id: UUID) -> Album | None:
        """Return an album by id, if present."""
        with wrap_store_errors("get album"):
            response = (
                self.client.table("albums")
                .select(_ALBUM_COLUMNS)
                .eq("id", str(album_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_album(response.data[0])

    def list_albums(self, owner_id: UUID) -> list[Album]:
        """Return the owner's albums, newest first."""
        with wrap_store_errors("list albums"):
            response = (
                self.client.table("albums")
                .select(_ALBUM_COLUMNS)
                .eq("user_id", str(owner_id))
                .order("created_at", desc=True)
                .execute()
            )
        return [_parse_album(row) for row in response.data or []]

    def update_album(
        self, album_id: UUID, owner_id: UUID, patch: dict[str, object]
    ) -> Album:
        """Update title/comment and return the album."""
        payload = dict(patch)
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        with wrap_store_errors("update album"):
            response = (
                self.client.table("albums")
                .update(payload)
                .eq("id", str(album_id))
                .eq("user_id", str(owner_id))
                .execute()
            )
        if not response.data:
            raise StoreError("Failed to update album")
        return _parse_album(response.data[0])

    def mark_unsealed(
        self, album_id: UUID, owner_id: UUID, unlock_at: datetime
    ) -> Album | None:
        """Set unlock_date only while it is still null."""
        with wrap_store_errors("unseal album"):
            response = (
                self.client.table("albums")
                .update(
                    {
                        "unlock_date": unlock_at.isoformat(),
                        "updated_at": unlock_at.isoformat(),
                    }
                )
                .eq("id", str(album_id))
                .eq("user_id", str(owner_id))
                .is_("unlock_date", "null")
                .execute()
            )
        if not response.data:
            return None
        return _parse_album(response.data[0])

    def delete_album(self, album_id: UUID, owner_id: UUID) -> None:
        """Delete an album row owned by the user."""
        with wrap_store_errors("delete album"):
            self.client.table("albums").delete().eq("id", str(album_id)).eq(
                "user_id", str(owner_id)
            ).execute()


def parse_timestamp(raw: object) -> datetime | None:
    """Parse a PostgREST timestamp into an aware datetime."""
    if not isinstance(raw, str) or not raw:
        return None
    value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def _parse_album(row: dict[str, object]) -> Album:
    created_at = parse_timestamp(row.get("created_at")) or datetime.now(tz=UTC)
    return Album(
        id=UUID(str(row["id"])),
        owner_id=UUID(str(row["user_id"])),
        title=str(row["title"]),
        comment=row.get("comment"),
        unlock_at=parse_timestamp(row.get("unlock_date")),
        created_at=created_at,
        updated_at=parse_timestamp(row.get("updated_at")) or created_at,
    )
