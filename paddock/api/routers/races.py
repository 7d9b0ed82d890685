"""API Router for race result submission."""

from fastapi import APIRouter, HTTPException

from paddock.api.schemas.race import (
    ProcessedRacesResponse,
    RaceResultRequest,
    RaceSummaryResponse,
)
from paddock.api.services.economy_service import build_result, get_engine, summary_to_response
from paddock.core.errors import RaceNotCompleteError, RaceProcessingError

router = APIRouter(prefix="/races", tags=["races"])


@router.get("", response_model=ProcessedRacesResponse)
async def list_races():
    engine = get_engine()
    return {
        "completed_races": engine.completed_races,
        "rounds": sorted(engine.processed_rounds),
    }


@router.post("", response_model=RaceSummaryResponse)
async def submit_race(request: RaceResultRequest):
    """
    Apply a completed race result.

    Scores every roster, moves prices, and runs contract expiry and
    reserve fills. Each round can be submitted once, in order.
    """
    engine = get_engine()
    try:
        summary = engine.process_race(build_result(request))
    except RaceNotCompleteError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RaceProcessingError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return summary_to_response(summary)
