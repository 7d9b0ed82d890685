"""Pydantic schemas for market assets."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class AssetKindSchema(str, Enum):
    """Asset kinds."""
    DRIVER = "driver"
    CONSTRUCTOR = "constructor"


class PriceTierSchema(str, Enum):
    A = "A"
    B = "B"
    C = "C"


class AssetResponse(BaseModel):
    """Market listing for one asset."""
    asset_id: str
    name: str
    kind: AssetKindSchema
    price: int
    previous_price: int
    price_change: int
    tier: PriceTierSchema
    season_points: int
    recent_points: list[int]
    driver_ids: list[str] = []
    constructor_id: Optional[str] = None
    is_active: bool = True


class AssetListResponse(BaseModel):
    count: int
    assets: list[AssetResponse]


class PriceChangeResponse(BaseModel):
    """One per-race price move."""
    asset_id: str
    round: int
    previous_price: int
    new_price: int
    delta: int
    target_price: int
    rolling_average: float
    race_points: int


class PriceHistoryResponse(BaseModel):
    asset_id: str
    history: list[PriceChangeResponse]
