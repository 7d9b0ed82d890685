"""API Router for the asset market."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from paddock.api.schemas.asset import (
    AssetKindSchema,
    AssetListResponse,
    AssetResponse,
    PriceHistoryResponse,
)
from paddock.api.services.economy_service import asset_to_response, get_engine
from paddock.core.enums import AssetKind

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get("", response_model=AssetListResponse)
async def list_assets(kind: Optional[AssetKindSchema] = Query(None, description="Filter by kind")):
    """All assets, most expensive first."""
    assets = get_engine().list_assets(AssetKind(kind.value) if kind else None)
    return {"count": len(assets), "assets": [asset_to_response(a) for a in assets]}


@router.get("/{asset_id}", response_model=AssetResponse)
async def get_asset(asset_id: str):
    asset = get_engine().get_asset(asset_id)
    if asset is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    return asset_to_response(asset)


@router.get("/{asset_id}/prices", response_model=PriceHistoryResponse)
async def get_price_history(asset_id: str):
    """Per-race price moves for an asset."""
    engine = get_engine()
    if engine.get_asset(asset_id) is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    return {
        "asset_id": asset_id,
        "history": [c.to_dict() for c in engine.price_history_for(asset_id)],
    }
