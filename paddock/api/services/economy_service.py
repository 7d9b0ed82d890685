"""
Service layer for the roster economy API.

Holds the process-wide EconomyEngine and translates API payloads into
engine calls.
"""

import logging
from typing import Optional

from paddock.core.config import EconomyConfig, get_config
from paddock.core.economy import EconomyEngine, RaceSummary
from paddock.core.enums import FinishStatus
from paddock.core.models.results import RaceResult, ResultEntry
from paddock.core.pricing.model import price_tier
from paddock.data.grid import load_grid


logger = logging.getLogger(__name__)

# In-memory engine shared by all requests
_engine: Optional[EconomyEngine] = None


def get_engine() -> EconomyEngine:
    """Get the shared engine, creating it with the default grid on first use."""
    global _engine
    if _engine is None:
        _engine = reset_engine()
    return _engine


def reset_engine(config: Optional[EconomyConfig] = None, load_default_grid: bool = True) -> EconomyEngine:
    """Replace the shared engine with a fresh one."""
    global _engine
    _engine = EconomyEngine(config or get_config())
    if load_default_grid:
        load_grid(_engine)
    logger.info(f"Economy engine reset ({len(_engine.assets)} assets, rules {_engine.config.version})")
    return _engine


def asset_to_response(asset) -> dict:
    engine = get_engine()
    data = asset.to_dict()
    data["price_change"] = asset.price_change
    data["tier"] = price_tier(
        asset.price, engine.config.tier_a_threshold, engine.config.tier_b_threshold
    ).value
    return data


def _entry_from_request(entry, sprint: bool, config: EconomyConfig) -> ResultEntry:
    status = FinishStatus(entry.status.value)
    if entry.raw_points is None:
        return ResultEntry.from_finish(
            entry.driver_id, entry.position,
            sprint=sprint, fastest_lap=entry.fastest_lap, status=status,
            grid_position=entry.grid_position,
            position_gained_bonus=config.position_gained_bonus,
            dsq_penalty=config.dsq_penalty,
        )
    return ResultEntry(
        driver_id=entry.driver_id,
        position=entry.position,
        raw_points=entry.raw_points,
        fastest_lap=entry.fastest_lap,
        status=status,
        grid_position=entry.grid_position,
    )


def build_result(request) -> RaceResult:
    """Convert a RaceResultRequest into a RaceResult."""
    config = get_engine().config
    return RaceResult(
        round=request.round,
        name=request.name,
        entries={e.driver_id: _entry_from_request(e, False, config) for e in request.entries},
        sprint_entries={e.driver_id: _entry_from_request(e, True, config) for e in request.sprint_entries},
        is_complete=request.is_complete,
    )


def summary_to_response(summary: RaceSummary) -> dict:
    return {
        "round": summary.round,
        "name": summary.name,
        "roster_points": {rid: s.total for rid, s in summary.scores.items()},
        "price_changes": [c.to_dict() for c in summary.price_changes if c.delta],
        "expiries": {rid: s.expired_ids for rid, s in summary.sweeps.items() if s.expired},
        "reserve_fills": {
            rid: [e.asset_id for e in s.reserve_entries]
            for rid, s in summary.sweeps.items() if s.reserve_entries
        },
        "winners": dict(summary.winners),
    }
