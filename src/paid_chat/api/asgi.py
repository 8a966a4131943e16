"""ASGI entrypoint for the paid chat API."""

from paid_chat.api.app import create_app
from paid_chat.containers import build_container

app = create_app(build_container())
