"""Pydantic schemas for league views."""

from pydantic import BaseModel


class StandingResponse(BaseModel):
    rank: int
    roster_id: str
    name: str
    total_points: int
    race_wins: int
    races_scored: int


class StandingsResponse(BaseModel):
    """League table ordered by season total."""
    league_id: str
    completed_races: int
    standings: list[StandingResponse]


class RaceWinsResponse(BaseModel):
    league_id: str
    race_wins: dict[str, int]
