"""ASGI entrypoint for the time-locked album API."""

from timelock_album.api.app import create_app
from timelock_album.containers import build_container

app = create_app(build_container())
