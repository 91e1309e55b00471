"""Tests for the album lifecycle service."""

from dataclasses import dataclass, replace
from uuid import uuid4

import pytest

from timelock_album.errors import (
    AuthRequiredError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from timelock_album.services.albums import AlbumService
from tests.conftest import (
    T0,
    FakeClock,
    InMemoryAlbumRepository,
    InMemoryBlobStore,
    InMemoryPhotoRepository,
)


def test_create_album_starts_sealed(album_service, owner) -> None:
    album = album_service.create(owner, "  Summer  ")

    assert album.title == "Summer"
    assert album.owner_id == owner
    assert album.unlock_at is None


def test_create_album_rejects_blank_title(album_service, owner, album_repository):
    with pytest.raises(ValidationError):
        album_service.create(owner, "   ")

    assert album_repository.albums == {}


def test_operations_require_authenticated_user(album_service, album_repository):
    album = album_service.create(uuid4(), "Mine")

    with pytest.raises(AuthRequiredError):
        album_service.create(None, "Title")
    with pytest.raises(AuthRequiredError):
        album_service.list_by_owner(None)
    with pytest.raises(AuthRequiredError):
        album_service.get_by_id(None, album.id)
    with pytest.raises(AuthRequiredError):
        album_service.unseal(None, album.id)
    with pytest.raises(AuthRequiredError):
        album_service.delete(None, album.id)
    with pytest.raises(AuthRequiredError):
        album_service.compute_stats(None)

    assert len(album_repository.albums) == 1


def test_list_by_owner_newest_first_with_photo_summaries(
    album_service, photo_service, owner, clock
) -> None:
    older = album_service.create(owner, "Older")
    clock.advance(minutes=5)
    newer = album_service.create(owner, "Newer")
    album_service.create(uuid4(), "Not mine")
    photo = photo_service.upload(
        owner, older.id, b"jpeg", "beach.jpg", 4, "image/jpeg"
    )

    listings = album_service.list_by_owner(owner)

    assert [item.album.id for item in listings] == [newer.id, older.id]
    assert listings[1].photos[0].id == photo.id
    assert listings[1].photos[0].original_name == "beach.jpg"
    assert listings[0].photos == []
    assert listings[0].access.status == "sealed"


def test_get_by_id_missing_album(album_service, owner) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        album_service.get_by_id(owner, uuid4())

    assert not isinstance(exc_info.value, ForbiddenError)
    assert exc_info.value.public_message == "album not found"


def test_get_by_id_other_owner_looks_like_not_found(album_service, owner) -> None:
    album = album_service.create(uuid4(), "Private")

    with pytest.raises(NotFoundError) as exc_info:
        album_service.get_by_id(owner, album.id)

    assert isinstance(exc_info.value, ForbiddenError)
    assert exc_info.value.public_message == "album not found"


def test_get_by_id_returns_metadata_in_every_state(
    album_service, owner, clock
) -> None:
    album = album_service.create(owner, "Capsule")

    assert album_service.get_by_id(owner, album.id).access.status == "sealed"

    album_service.unseal(owner, album.id)
    view = album_service.get_by_id(owner, album.id)
    assert view.access.can_access is True
    assert view.access.time_remaining_ms == 86_400_000

    clock.advance(hours=25)
    expired = album_service.get_by_id(owner, album.id)
    assert expired.access.status == "expired"
    assert expired.album.title == "Capsule"


def test_update_metadata_in_any_state(album_service, owner, clock) -> None:
    album = album_service.create(owner, "Before")
    album_service.unseal(owner, album.id)
    clock.advance(days=2)

    updated = album_service.update_metadata(
        owner, album.id, title="After", comment="Good times"
    )

    assert updated.title == "After"
    assert updated.comment == "Good times"
    assert updated.unlock_at == T0


def test_update_metadata_comment_limit(album_service, owner) -> None:
    album = album_service.create(owner, "Notes")

    accepted = album_service.update_metadata(owner, album.id, comment="x" * 500)
    assert len(accepted.comment) == 500

    with pytest.raises(ValidationError):
        album_service.update_metadata(owner, album.id, comment="x" * 501)


def test_update_metadata_checks_owner(album_service, owner) -> None:
    album = album_service.create(uuid4(), "Other")

    with pytest.raises(ForbiddenError):
        album_service.update_metadata(owner, album.id, title="Hijack")


def test_unseal_sets_server_time(album_service, owner, clock) -> None:
    album = album_service.create(owner, "Capsule")
    clock.advance(hours=3)

    unsealed = album_service.unseal(owner, album.id)

    assert unsealed.unlock_at == T0.replace(hour=15)


def test_second_unseal_is_rejected(album_service, owner, clock) -> None:
    album = album_service.create(owner, "Capsule")
    first = album_service.unseal(owner, album.id)
    clock.advance(hours=1)

    with pytest.raises(ConflictError):
        album_service.unseal(owner, album.id)

    assert album_service.get_by_id(owner, album.id).album.unlock_at == first.unlock_at


@dataclass
class _StaleReadAlbumRepository(InMemoryAlbumRepository):
    """Returns the sealed snapshot to every reader, as two racing requests see it."""

    def get_album(self, album_id):  # type: ignore[no-untyped-def]
        album = self.albums.get(album_id)
        if album is None:
            return None
        return replace(album, unlock_at=None)


def test_concurrent_unseal_loses_on_conditional_update() -> None:
    clock = FakeClock()
    repository = _StaleReadAlbumRepository(clock=clock)
    service = AlbumService(
        album_repository=repository,
        photo_repository=InMemoryPhotoRepository(clock=clock),
        blob_store=InMemoryBlobStore(),
        clock=clock,
    )
    owner = uuid4()
    album = service.create(owner, "Race")
    first = service.unseal(owner, album.id)
    clock.advance(minutes=1)

    with pytest.raises(ConflictError):
        service.unseal(owner, album.id)

    assert repository.albums[album.id].unlock_at == first.unlock_at


def test_unseal_other_owner(album_service, owner) -> None:
    album = album_service.create(uuid4(), "Other")

    with pytest.raises(ForbiddenError):
        album_service.unseal(owner, album.id)


def test_delete_cascades_photos_and_blobs(
    album_service, photo_service, owner, photo_repository, blob_store
) -> None:
    album = album_service.create(owner, "Doomed")
    keep = album_service.create(owner, "Keep")
    photo_service.upload(owner, album.id, b"a", "a.png", 1, "image/png")
    photo_service.upload(owner, album.id, b"b", "b.png", 1, "image/png")
    kept_photo = photo_service.upload(owner, keep.id, b"c", "c.png", 1, "image/png")

    album_service.delete(owner, album.id)

    assert all(p.album_id != album.id for p in photo_repository.photos.values())
    assert photo_repository.list_photos(album.id) == []
    assert list(blob_store.objects) == [kept_photo.storage_key]
    assert len(blob_store.removed) == 2
    with pytest.raises(NotFoundError):
        album_service.get_by_id(owner, album.id)


def test_delete_survives_blob_cleanup_failure(
    album_service, photo_service, owner, album_repository, photo_repository, blob_store
) -> None:
    album = album_service.create(owner, "Doomed")
    photo_service.upload(owner, album.id, b"a", "a.png", 1, "image/png")
    blob_store.fail_on_remove = True

    album_service.delete(owner, album.id)

    assert album.id not in album_repository.albums
    assert photo_repository.photos == {}


def test_delete_other_owner_is_rejected(album_service, owner, album_repository):
    album = album_service.create(uuid4(), "Other")

    with pytest.raises(ForbiddenError):
        album_service.delete(owner, album.id)

    assert album.id in album_repository.albums
