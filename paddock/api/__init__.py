"""Paddock API package - FastAPI surface for the roster economy."""

from paddock.api.main import app, create_app

__all__ = ["app", "create_app"]
