"""Error taxonomy shared by services, adapters and the HTTP layer."""


class AlbumError(Exception):
    """Base class for per-operation failures.

    ``public_message`` is safe to show to the end user; ``str(exc)`` may carry
    internal detail meant for logs only.
    """

    public_message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)


class AuthRequiredError(AlbumError):
    """No authenticated user was supplied."""

    public_message = "Authentication required."


class NotFoundError(AlbumError):
    """The requested record does not exist for this user."""

    public_message = "album not found"

    def __init__(self, message: str | None = None, *, public: str | None = None):
        super().__init__(message)
        if public is not None:
            self.public_message = public


class ForbiddenError(NotFoundError):
    """The record exists but belongs to another user.

    Shares the not-found public message so callers cannot probe for
    existence.
    """


class ValidationError(AlbumError):
    """Input was rejected before any store mutation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.public_message = message


class ConflictError(AlbumError):
    """The operation contradicts the album lifecycle."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.public_message = message


class StoreError(AlbumError):
    """The row store or blob store failed."""

    public_message = "Storage request failed. Please try again."
