"""Pydantic schemas for roster commands."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# === Enums ===

class TradeActionSchema(str, Enum):
    """Trade-log action kinds."""
    BUY = "BUY"
    SELL = "SELL"
    SWAP = "SWAP"
    SELL_EXPIRY = "SELL_EXPIRY"
    RESERVE_FILL = "RESERVE_FILL"


class SlotStatusSchema(str, Enum):
    """Driver slot states."""
    HELD = "HELD"
    EMPTY = "EMPTY"
    PENDING_LOCKOUT = "PENDING_LOCKOUT"


# === Request Schemas ===

class CreateRosterRequest(BaseModel):
    """Request to create a roster."""
    owner_id: str = Field(..., description="Participant owning the roster")
    name: str = Field(..., description="Roster display name")
    league_id: Optional[str] = Field(None, description="League the roster competes in")


class AssetCommandRequest(BaseModel):
    """Buy, sell or ace designation of one asset."""
    asset_id: str = Field(..., description="Driver or constructor id")


class SwapRequest(BaseModel):
    """Replace a held asset with another of the same kind."""
    old_asset_id: str = Field(..., description="Held asset to release")
    new_asset_id: str = Field(..., description="Asset to acquire")


# === Response Schemas ===

class ContractResponse(BaseModel):
    """A held contract."""
    contract_id: str
    asset_id: str
    kind: str
    purchase_price: int
    current_price: int
    contract_length: int
    added_at_race: int
    points_scored: int
    races_held: int
    races_remaining: int
    is_reserve_pick: bool


class AceResponse(BaseModel):
    asset_id: str
    kind: str


class RosterResponse(BaseModel):
    """Full roster state."""
    roster_id: str
    owner_id: str
    name: str
    league_id: Optional[str] = None
    budget: int
    total_points: int
    locked_points: int
    bonus_points: int
    catch_up_points: int
    penalty_points: int
    races_since_transfer: int
    drivers: list[ContractResponse]
    constructor: Optional[ContractResponse] = None
    ace: Optional[AceResponse] = None
    driver_lockouts: dict[str, int] = Field(default_factory=dict)
    constructor_lockouts: dict[str, int] = Field(default_factory=dict)
    race_history: dict[str, int] = Field(default_factory=dict)
    joined_at_race: int


class TradeEntryResponse(BaseModel):
    """One trade-log entry."""
    entry_id: str
    round: int
    roster_id: str
    action: TradeActionSchema
    asset_id: str
    price: int
    fee: int
    reason: str
    proceeds: int
    bonus: int
    replaced_asset_id: Optional[str] = None


class CommandResponse(BaseModel):
    """Outcome of a successful roster command."""
    message: str
    roster: RosterResponse
    entry: Optional[TradeEntryResponse] = None
    proceeds: int = 0
    fee: int = 0
    value_capture_bonus: int = 0


class TradeLogResponse(BaseModel):
    roster_id: str
    count: int
    entries: list[TradeEntryResponse]


class SlotResponse(BaseModel):
    status: SlotStatusSchema
    asset_id: Optional[str] = None
    lockout_expires_at: Optional[int] = None


class SlotsResponse(BaseModel):
    """Driver slot view of a roster."""
    roster_id: str
    completed_races: int
    slots: list[SlotResponse]


class SaleQuoteResponse(BaseModel):
    """What selling a held asset would pay now."""
    asset_id: str
    price: int
    proceeds: int
    fee: int
    value_capture_bonus: int
    early_termination: bool
