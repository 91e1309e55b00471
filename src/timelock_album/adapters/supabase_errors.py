"""Translation of Supabase client failures into ``StoreError``."""

from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError
from storage3.utils import StorageException

from timelock_album.errors import StoreError

_STORE_EXCEPTIONS = (APIError, StorageException, httpx.HTTPError)


@contextmanager
def wrap_store_errors(action: str) -> Iterator[None]:
    """Re-raise Supabase and transport errors as ``StoreError``."""
    try:
        yield
    except _STORE_EXCEPTIONS as exc:
        raise StoreError(f"Supabase {action} failed: {exc}") from exc
