"""FastAPI application factory."""

import logging
from uuid import UUID

from fastapi import Depends, FastAPI, File, Header, Request, UploadFile, status
from fastapi.responses import JSONResponse, Response

from timelock_album.api.models import (
    AccessOut,
    AlbumDetailOut,
    AlbumListingOut,
    AlbumOut,
    AlbumStatsOut,
    CreateAlbumRequest,
    PhotoOut,
    UpdateAlbumRequest,
    UpdateCaptionRequest,
)
from timelock_album.app_logging import configure_logging
from timelock_album.containers import AppContainer
from timelock_album.domain.photos import PhotoFile
from timelock_album.errors import (
    AlbumError,
    AuthRequiredError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from timelock_album.services.photos import MAX_PHOTO_BYTES, validate_photo_file

_STATUS_BY_ERROR: list[tuple[type[AlbumError], int]] = [
    (AuthRequiredError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, 422),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StoreError, status.HTTP_502_BAD_GATEWAY),
]


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def current_owner(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID | None:
    """Resolve the bearer token to the caller's user id, if any."""
    token = _bearer_token(authorization)
    user = _container(request).auth_gateway.current_user(token)
    return user.id if user else None


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Time-locked album")
    app.state.container = container

    @app.exception_handler(AlbumError)
    async def album_error_handler(request: Request, exc: AlbumError) -> JSONResponse:
        status_code = _status_for(exc)
        if isinstance(exc, StoreError):
            logger.error(
                "Store failure on %s %s: %s",
                request.method,
                request.url.path,
                exc,
                exc_info=exc.__cause__ or exc,
            )
        else:
            logger.info(
                "%s on %s %s: %s",
                type(exc).__name__,
                request.method,
                request.url.path,
                exc,
            )
        return JSONResponse(
            status_code=status_code, content={"detail": exc.public_message}
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/albums", status_code=status.HTTP_201_CREATED)
    def create_album(
        body: CreateAlbumRequest,
        request: Request,
        owner: UUID | None = Depends(current_owner),
    ) -> AlbumOut:
        """Create a sealed album."""
        album = _container(request).album_service.create(owner, body.title)
        return AlbumOut.from_album(album)

    @app.get("/albums")
    def list_albums(
        request: Request, owner: UUID | None = Depends(current_owner)
    ) -> dict[str, list[AlbumListingOut]]:
        """List the caller's albums, newest first."""
        listings = _container(request).album_service.list_by_owner(owner)
        return {"albums": [AlbumListingOut.from_listing(item) for item in listings]}

    @app.get("/albums/stats")
    def album_stats(
        request: Request, owner: UUID | None = Depends(current_owner)
    ) -> AlbumStatsOut:
        """Return album counts per access state."""
        stats = _container(request).album_service.compute_stats(owner)
        return AlbumStatsOut.from_stats(stats)

    @app.get("/albums/{album_id}")
    def get_album(
        album_id: UUID,
        request: Request,
        owner: UUID | None = Depends(current_owner),
    ) -> AlbumDetailOut:
        """Return album metadata; photo URLs only inside the viewing window."""
        state_container = _container(request)
        view = state_container.album_service.get_by_id(owner, album_id)
        photos: list[PhotoOut] = []
        if view.access.can_access:
            photo_service = state_container.photo_service
            for photo in view.photos:
                try:
                    url = photo_service.get_signed_url(photo.storage_key)
                except StoreError:
                    logger.warning(
                        "Failed to sign photo URL: photo_id=%s", photo.id, exc_info=True
                    )
                    url = None
                photos.append(PhotoOut.from_photo(photo, url))
        return AlbumDetailOut(
            **AlbumOut.from_album(view.album).model_dump(),
            access=AccessOut.from_decision(view.access),
            photo_count=len(view.photos),
            photos=photos,
        )

    @app.patch("/albums/{album_id}")
    def update_album(
        album_id: UUID,
        body: UpdateAlbumRequest,
        request: Request,
        owner: UUID | None = Depends(current_owner),
    ) -> AlbumOut:
        """Update album title and/or comment."""
        album = _container(request).album_service.update_metadata(
            owner, album_id, title=body.title, comment=body.comment
        )
        return AlbumOut.from_album(album)

    @app.post("/albums/{album_id}/unseal")
    def unseal_album(
        album_id: UUID,
        request: Request,
        owner: UUID | None = Depends(current_owner),
    ) -> AlbumOut:
        """Start the album's 24 hour viewing window."""
        album = _container(request).album_service.unseal(owner, album_id)
        return AlbumOut.from_album(album)

    @app.delete("/albums/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_album(
        album_id: UUID,
        request: Request,
        owner: UUID | None = Depends(current_owner),
    ) -> Response:
        """Delete an album and its photos."""
        _container(request).album_service.delete(owner, album_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/albums/{album_id}/photos")
    def list_photos(
        album_id: UUID,
        request: Request,
        owner: UUID | None = Depends(current_owner),
    ) -> dict[str, list[PhotoOut]]:
        """List photo metadata in upload order."""
        photos = _container(request).photo_service.list_by_album(owner, album_id)
        return {"photos": [PhotoOut.from_photo(photo) for photo in photos]}

    @app.post("/albums/{album_id}/photos", status_code=status.HTTP_201_CREATED)
    def upload_photos(
        album_id: UUID,
        request: Request,
        files: list[UploadFile] = File(...),
        owner: UUID | None = Depends(current_owner),
    ) -> dict[str, list[PhotoOut]]:
        """Upload up to ten photos into a sealed album."""
        photo_service = _container(request).photo_service
        photo_service.open_batch(owner, album_id, len(files))
        photo_files = [read_photo_upload(upload) for upload in files]
        photos = photo_service.upload_many(owner, album_id, photo_files)
        return {"photos": [PhotoOut.from_photo(photo) for photo in photos]}

    @app.patch("/photos/{photo_id}")
    def update_caption(
        photo_id: UUID,
        body: UpdateCaptionRequest,
        request: Request,
        owner: UUID | None = Depends(current_owner),
    ) -> PhotoOut:
        """Update a photo caption."""
        photo = _container(request).photo_service.update_caption(
            owner, photo_id, body.caption
        )
        return PhotoOut.from_photo(photo)

    @app.delete("/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_photo(
        photo_id: UUID,
        request: Request,
        owner: UUID | None = Depends(current_owner),
    ) -> Response:
        """Delete a photo."""
        _container(request).photo_service.delete(owner, photo_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


def read_photo_upload(upload: UploadFile) -> PhotoFile:
    """Read one multipart part, never more than the photo size limit allows.

    A part whose declared size or type is already invalid is rejected
    without reading its body.
    """
    file_name = upload.filename or "photo"
    mime_type = upload.content_type or ""
    try:
        if upload.size is not None:
            validate_photo_file(upload.size, mime_type)
        content = upload.file.read(MAX_PHOTO_BYTES + 1)
        validate_photo_file(len(content), mime_type)
    except ValidationError as exc:
        raise ValidationError(f"{file_name}: {exc}") from exc
    return PhotoFile(
        content=content,
        file_name=file_name,
        size_bytes=len(content),
        mime_type=mime_type,
    )


def _bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _status_for(exc: AlbumError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
