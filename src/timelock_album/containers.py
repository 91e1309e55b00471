"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from timelock_album.adapters.supabase_album_repository import SupabaseAlbumRepository
from timelock_album.adapters.supabase_auth_gateway import SupabaseAuthGateway
from timelock_album.adapters.supabase_blob_store import SupabaseBlobStore
from timelock_album.adapters.supabase_photo_repository import SupabasePhotoRepository
from timelock_album.config import Settings
from timelock_album.services.albums import AlbumService
from timelock_album.services.auth import AuthGateway
from timelock_album.services.photos import PhotoService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_gateway: AuthGateway
    album_service: AlbumService
    photo_service: PhotoService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    album_repository = SupabaseAlbumRepository(supabase_client)
    photo_repository = SupabasePhotoRepository(supabase_client)
    blob_store = SupabaseBlobStore(
        supabase_client, bucket=resolved_settings.storage_bucket
    )
    album_service = AlbumService(
        album_repository=album_repository,
        photo_repository=photo_repository,
        blob_store=blob_store,
    )
    photo_service = PhotoService(
        album_service=album_service,
        photo_repository=photo_repository,
        blob_store=blob_store,
        signed_url_ttl_seconds=resolved_settings.signed_url_ttl_seconds,
    )
    return AppContainer(
        settings=resolved_settings,
        auth_gateway=SupabaseAuthGateway(supabase_client),
        album_service=album_service,
        photo_service=photo_service,
    )
