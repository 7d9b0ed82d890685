"""API Router for league standings and race wins."""

from fastapi import APIRouter, HTTPException

from paddock.api.schemas.league import RaceWinsResponse, StandingsResponse
from paddock.api.services.economy_service import get_engine

router = APIRouter(prefix="/leagues", tags=["leagues"])


def _require_league(league_id: str) -> None:
    if not get_engine().rosters_in_league(league_id):
        raise HTTPException(status_code=404, detail="League not found")


@router.get("/{league_id}/standings", response_model=StandingsResponse)
async def get_standings(league_id: str):
    """League table by season total, ties broken by roster name."""
    _require_league(league_id)
    engine = get_engine()
    return {
        "league_id": league_id,
        "completed_races": engine.completed_races,
        "standings": [s.to_dict() for s in engine.league_standings(league_id)],
    }


@router.get("/{league_id}/race-wins", response_model=RaceWinsResponse)
async def get_race_wins(league_id: str):
    _require_league(league_id)
    return {"league_id": league_id, "race_wins": get_engine().race_wins(league_id)}
