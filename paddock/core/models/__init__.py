"""Domain models for the roster economy."""

from paddock.core.models.asset import Asset, create_driver, create_constructor
from paddock.core.models.results import (
    RaceResult,
    ResultEntry,
    RACE_POINTS,
    SPRINT_POINTS,
    build_race_result,
)
from paddock.core.models.roster import Roster, RosterSlot, AceDesignation

__all__ = [
    "Asset",
    "create_driver",
    "create_constructor",
    "RaceResult",
    "ResultEntry",
    "RACE_POINTS",
    "SPRINT_POINTS",
    "build_race_result",
    "Roster",
    "RosterSlot",
    "AceDesignation",
]
