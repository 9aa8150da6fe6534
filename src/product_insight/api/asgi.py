"""ASGI entrypoint for the product insight API."""

from product_insight.api.app import create_app
from product_insight.containers import build_container

app = create_app(build_container())
