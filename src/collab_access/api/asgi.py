"""ASGI entrypoint for the collaboration access API."""

from collab_access.api.app import create_app
from collab_access.containers import build_container

app = create_app(build_container())
