"""API services for the roster economy."""

from paddock.api.services import economy_service

__all__ = ["economy_service"]
