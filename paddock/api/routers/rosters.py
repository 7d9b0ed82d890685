"""
API Router for roster commands.

Provides endpoints for:
- Creating and viewing rosters
- Buying, selling and swapping assets
- Ace designation
- Trade history and slot view
"""

from fastapi import APIRouter, HTTPException

from paddock.api.schemas.roster import (
    AssetCommandRequest,
    CommandResponse,
    CreateRosterRequest,
    RosterResponse,
    SaleQuoteResponse,
    SlotsResponse,
    SwapRequest,
    TradeLogResponse,
)
from paddock.api.services.economy_service import get_engine
from paddock.core.errors import CommandResult, RejectionReason

router = APIRouter(prefix="/rosters", tags=["rosters"])


def _command_response(result: CommandResult) -> dict:
    """Map a command outcome to a response, raising on rejection."""
    if not result.ok:
        status = 404 if result.reason == RejectionReason.NOT_FOUND else 409
        raise HTTPException(status_code=status, detail=result.message)
    return {
        "message": result.message,
        "roster": result.roster,
        "entry": result.entry.to_dict() if result.entry else None,
        "proceeds": result.proceeds,
        "fee": result.fee,
        "value_capture_bonus": result.value_capture_bonus,
    }


def _get_roster_or_404(roster_id: str):
    roster = get_engine().get_roster(roster_id)
    if roster is None:
        raise HTTPException(status_code=404, detail="Roster not found")
    return roster


# === Rosters ===

@router.post("", response_model=RosterResponse, status_code=201)
async def create_roster(request: CreateRosterRequest):
    """
    Create an empty roster with the starting budget.

    Rosters created mid-season receive the late-joiner catch-up.
    """
    roster = get_engine().create_roster(request.owner_id, request.name, request.league_id)
    return roster.to_dict()


@router.get("/{roster_id}", response_model=RosterResponse)
async def get_roster(roster_id: str):
    return _get_roster_or_404(roster_id).to_dict()


@router.get("/{roster_id}/slots", response_model=SlotsResponse)
async def get_slots(roster_id: str):
    """Driver slots: held, empty, or waiting on a lockout."""
    engine = get_engine()
    roster = _get_roster_or_404(roster_id)
    completed = engine.completed_races
    return {
        "roster_id": roster_id,
        "completed_races": completed,
        "slots": [s.to_dict() for s in roster.slots(completed, engine.config.roster_size)],
    }


# === Transfers ===

@router.post("/{roster_id}/buy", response_model=CommandResponse)
async def buy(roster_id: str, request: AssetCommandRequest):
    """Buy a driver or constructor at its current market price."""
    return _command_response(get_engine().buy(roster_id, request.asset_id))


@router.post("/{roster_id}/sell", response_model=CommandResponse)
async def sell(roster_id: str, request: AssetCommandRequest):
    """
    Sell a held asset.

    Contracts with races remaining pay an early-termination fee.
    """
    return _command_response(get_engine().sell(roster_id, request.asset_id))


@router.post("/{roster_id}/swap", response_model=CommandResponse)
async def swap(roster_id: str, request: SwapRequest):
    return _command_response(
        get_engine().swap(roster_id, request.old_asset_id, request.new_asset_id)
    )


@router.get("/{roster_id}/sale-quote/{asset_id}", response_model=SaleQuoteResponse)
async def sale_quote(roster_id: str, asset_id: str):
    """What selling a held asset would pay right now."""
    _get_roster_or_404(roster_id)
    quote = get_engine().quote_sale(roster_id, asset_id)
    if quote is None:
        raise HTTPException(status_code=404, detail=f"{asset_id} is not on this roster")
    return {"asset_id": asset_id, **quote.to_dict()}


# === Ace ===

@router.put("/{roster_id}/ace", response_model=CommandResponse)
async def set_ace(roster_id: str, request: AssetCommandRequest):
    return _command_response(get_engine().set_ace(roster_id, request.asset_id))


@router.delete("/{roster_id}/ace", response_model=CommandResponse)
async def clear_ace(roster_id: str):
    return _command_response(get_engine().clear_ace(roster_id))


# === History ===

@router.get("/{roster_id}/trades", response_model=TradeLogResponse)
async def get_trades(roster_id: str):
    _get_roster_or_404(roster_id)
    entries = get_engine().trades_for(roster_id)
    return {
        "roster_id": roster_id,
        "count": len(entries),
        "entries": [e.to_dict() for e in entries],
    }
