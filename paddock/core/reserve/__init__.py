"""Automatic reserve picks for short rosters."""

from paddock.core.reserve.autofill import ReserveAutoFill

__all__ = ["ReserveAutoFill"]
