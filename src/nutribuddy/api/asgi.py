"""ASGI entrypoint for the NutriBuddy API."""

from nutribuddy.api.app import create_app
from nutribuddy.containers import build_container

app = create_app(build_container())
