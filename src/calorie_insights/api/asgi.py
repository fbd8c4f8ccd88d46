"""ASGI entrypoint for the calorie insights API."""

from calorie_insights.api.app import create_app
from calorie_insights.containers import build_container

app = create_app(build_container())
