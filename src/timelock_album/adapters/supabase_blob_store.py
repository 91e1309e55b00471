"""Supabase Storage blob store."""

import logging
from dataclasses import dataclass

from supabase import Client

from timelock_album.adapters.supabase_errors import wrap_store_errors
from timelock_album.services.photos import BlobStore

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseBlobStore(BlobStore):
    """Stores photo bytes in a Supabase Storage bucket."""

    client: Client
    bucket: str = "public-photos"

    def put(self, key: str, content: bytes, content_type: str) -> str:
        """Upload bytes under ``key`` and return the stored path."""
        with wrap_store_errors("upload blob"):
            response = self.client.storage.from_(self.bucket).upload(
                path=key,
                file=content,
                file_options={"content-type": content_type},
            )
        return getattr(response, "path", None) or key

    def signed_url(self, key: str, ttl_seconds: int) -> str:
        """Return a signed URL, falling back to the public URL."""
        with wrap_store_errors("sign url"):
            payload = self.client.storage.from_(self.bucket).create_signed_url(
                key, ttl_seconds
            )
        signed = (payload or {}).get("signedURL") or (payload or {}).get("signedUrl")
        if signed:
            return signed
        _logger.warning("Signed URL unavailable, using public URL: key=%s", key)
        return self.public_url(key)

    def public_url(self, key: str) -> str:
        """Return the bucket's public URL for ``key``."""
        with wrap_store_errors("public url"):
            return self.client.storage.from_(self.bucket).get_public_url(key)

    def remove(self, keys: list[str]) -> None:
        """Remove objects from the bucket."""
        if not keys:
            return
        with wrap_store_errors("remove blobs"):
            self.client.storage.from_(self.bucket).remove(keys)
