"""Domain models for album photos."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Photo:
    """Represents a photo row stored against an album."""

    id: UUID
    album_id: UUID
    storage_key: str
    original_name: str
    size_bytes: int
    caption: str | None
    uploaded_at: datetime


@dataclass(frozen=True)
class PhotoSummary:
    """Lightweight photo entry attached to album listings."""

    id: UUID
    original_name: str


@dataclass(frozen=True)
class PhotoFile:
    """A file submitted for upload."""

    content: bytes
    file_name: str
    size_bytes: int
    mime_type: str
