"""ASGI entrypoint for the SmartCal API."""

from smartcal.api.app import create_app
from smartcal.containers import build_container

app = create_app(build_container())
