"""Shared pytest fixtures for Paddock tests."""

import pytest

from paddock.core.config import EconomyConfig
from paddock.core.economy import EconomyEngine
from paddock.core.models.asset import Asset, create_constructor, create_driver
from paddock.core.models.results import RaceResult, ResultEntry
from paddock.core.models.roster import Roster
from paddock.core.transactions.trade_log import TradeLog
from paddock.core.transfers.engine import TransferEngine


# Small market used across unit tests: (asset_id, price)
DRIVER_PRICES = [
    ("d1", 80),
    ("d2", 60),
    ("d3", 50),
    ("d4", 40),
    ("d5", 30),
    ("d6", 20),
    ("d7", 10),
    ("d8", 5),
    ("star", 150),
]
CONSTRUCTOR_PRICES = [
    ("c1", 90, ("d1", "d2")),
    ("c2", 40, ("d7", "d8")),
]

# Positions outside the points and the podium
MIDFIELD = 11


# =============================================================================
# Config and market fixtures
# =============================================================================


@pytest.fixture
def config() -> EconomyConfig:
    """Current rule set with defaults."""
    return EconomyConfig()


def build_assets() -> dict[str, Asset]:
    assets = {}
    for asset_id, price in DRIVER_PRICES:
        assets[asset_id] = create_driver(asset_id, asset_id.upper(), price)
    for asset_id, price, drivers in CONSTRUCTOR_PRICES:
        assets[asset_id] = create_constructor(asset_id, asset_id.upper(), price, drivers)
    return assets


@pytest.fixture
def assets() -> dict[str, Asset]:
    """Standalone asset map for component tests."""
    return build_assets()


@pytest.fixture
def transfers(config, assets) -> TransferEngine:
    return TransferEngine(config, assets, TradeLog())


@pytest.fixture
def bare_roster(config) -> Roster:
    """Roster outside any engine."""
    return Roster(owner_id="owner-1", name="Alpha", budget=config.starting_budget)


@pytest.fixture
def make_engine():
    """Factory for an engine loaded with the small test market."""
    def _make(config: EconomyConfig = None) -> EconomyEngine:
        engine = EconomyEngine(config or EconomyConfig())
        for asset in build_assets().values():
            engine.register_asset(asset)
        return engine
    return _make


@pytest.fixture
def engine(make_engine) -> EconomyEngine:
    return make_engine()


@pytest.fixture
def roster(engine) -> Roster:
    return engine.create_roster("owner-1", "Alpha", league_id="league-1")


# =============================================================================
# Result fixtures
# =============================================================================


def make_result(
    round: int,
    points: dict = None,
    positions: dict = None,
    sprint_points: dict = None,
    fastest_lap: str = None,
    is_complete: bool = True,
) -> RaceResult:
    """
    Build a result from raw points per driver.

    Drivers without an explicit position finish in the midfield so they
    never count as podium finishers.
    """
    points = points or {}
    positions = positions or {}
    entries = {}
    for driver_id in sorted(set(points) | set(positions)):
        entries[driver_id] = ResultEntry(
            driver_id=driver_id,
            position=positions.get(driver_id, MIDFIELD),
            raw_points=points.get(driver_id, 0),
            fastest_lap=(driver_id == fastest_lap),
        )
    sprint_entries = {
        driver_id: ResultEntry(driver_id=driver_id, position=MIDFIELD, raw_points=pts)
        for driver_id, pts in (sprint_points or {}).items()
    }
    return RaceResult(
        round=round,
        name=f"Round {round}",
        entries=entries,
        sprint_entries=sprint_entries,
        is_complete=is_complete,
    )


@pytest.fixture
def race():
    """Factory for race results (see make_result)."""
    return make_result


@pytest.fixture
def run_races(engine, race):
    """Process consecutive empty races on the default engine."""
    def _run(count: int, points: dict = None):
        summaries = []
        for _ in range(count):
            summaries.append(engine.process_race(race(engine.completed_races + 1, points)))
        return summaries
    return _run
