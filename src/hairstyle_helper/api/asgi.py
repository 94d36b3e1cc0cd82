"""ASGI entrypoint for the hairstyle helper API."""

from hairstyle_helper.api.app import create_app
from hairstyle_helper.containers import build_container

app = create_app(build_container())
