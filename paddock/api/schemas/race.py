"""Pydantic schemas for race result submission."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from paddock.api.schemas.asset import PriceChangeResponse


class FinishStatusSchema(str, Enum):
    FINISHED = "finished"
    DNF = "dnf"
    DSQ = "dsq"


class ResultEntryRequest(BaseModel):
    """One driver's result. Raw points are derived from position when omitted."""
    driver_id: str = Field(..., description="Driver asset id")
    position: Optional[int] = Field(None, ge=1, description="Finishing position, empty if unclassified")
    grid_position: Optional[int] = Field(None, ge=1, description="Starting grid position")
    raw_points: Optional[int] = Field(None, description="Points as published by the provider")
    fastest_lap: bool = Field(False, description="Set the fastest lap")
    status: FinishStatusSchema = FinishStatusSchema.FINISHED


class RaceResultRequest(BaseModel):
    """A completed race as handed over by the results provider."""
    round: int = Field(..., ge=1, description="Season round number")
    name: str = Field("", description="Race name")
    entries: list[ResultEntryRequest] = Field(..., description="Main race results")
    sprint_entries: list[ResultEntryRequest] = Field(
        default_factory=list,
        description="Sprint results, empty unless a sprint weekend",
    )
    is_complete: bool = Field(True, description="Provider marked the result final")


class RaceSummaryResponse(BaseModel):
    """What processing a race changed."""
    round: int
    name: str
    roster_points: dict[str, int]
    price_changes: list[PriceChangeResponse]
    expiries: dict[str, list[str]]
    reserve_fills: dict[str, list[str]]
    winners: dict[str, Optional[str]]


class ProcessedRacesResponse(BaseModel):
    completed_races: int
    rounds: list[int]
