"""
Season Simulation - drives the economy engine through a full season.

The SeasonSimulator:
- Loads the default grid into an engine
- Creates rosters owned by simulated strategies, plus late joiners
- Lets every strategy trade and pick an ace before each race
- Simulates each race and hands the result to the engine
- Reports standings, price movers and trade volume at the end
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from paddock.core.config import EconomyConfig
from paddock.core.economy import EconomyEngine, RaceSummary
from paddock.core.enums import TradeAction
from paddock.core.league.aggregator import LeagueStanding
from paddock.data.grid import load_grid
from paddock.simulation.race import RaceSimulator
from paddock.simulation.strategies import STRATEGIES, RosterStrategy


logger = logging.getLogger(__name__)

SIM_LEAGUE_ID = "sim-league"


@dataclass
class PriceMover:
    asset_id: str
    opening_price: int
    closing_price: int

    @property
    def delta(self) -> int:
        return self.closing_price - self.opening_price

    def __str__(self) -> str:
        return f"{self.asset_id}: {self.opening_price} -> {self.closing_price} ({self.delta:+d})"


@dataclass
class SeasonReport:
    """Outcome of a simulated season."""
    rounds: int
    standings: list[LeagueStanding] = field(default_factory=list)
    movers: list[PriceMover] = field(default_factory=list)
    trade_count: int = 0
    expiry_count: int = 0
    reserve_fill_count: int = 0

    @property
    def champion(self) -> Optional[LeagueStanding]:
        return self.standings[0] if self.standings else None

    def __str__(self) -> str:
        lines = [f"Season over after {self.rounds} races"]
        lines.append("Standings:")
        for row in self.standings:
            lines.append(f"  {row.rank:>2}. {row.name:<20} {row.total_points:>5} pts  {row.race_wins} wins")
        lines.append("Biggest price movers:")
        for mover in self.movers:
            lines.append(f"  {mover}")
        lines.append(
            f"Trades: {self.trade_count} "
            f"(expiries {self.expiry_count}, reserve picks {self.reserve_fill_count})"
        )
        return "\n".join(lines)


class SeasonSimulator:
    """
    Orchestrates a simulated season against one EconomyEngine.

    Rosters cycle through the registered strategies in name order.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        roster_count: int = 6,
        late_joiners: int = 1,
        join_round: int = 4,
        rounds: Optional[int] = None,
        config: Optional[EconomyConfig] = None,
        engine: Optional[EconomyEngine] = None,
    ) -> None:
        self.engine = engine or EconomyEngine(config or EconomyConfig())
        if not self.engine.assets:
            load_grid(self.engine)
        self.races = RaceSimulator(seed=seed)
        self.roster_count = roster_count
        self.late_joiners = late_joiners
        self.join_round = join_round
        self.rounds = rounds or self.engine.config.races_per_season

        self.strategies: dict[str, RosterStrategy] = {}
        self._opening_prices = {a.asset_id: a.price for a in self.engine.assets.values()}
        self._on_race_complete: list[Callable[[RaceSummary], None]] = []

    def on_race_complete(self, callback: Callable[[RaceSummary], None]) -> None:
        """Register callback for when each race has been processed."""
        self._on_race_complete.append(callback)

    def _strategy_for(self, index: int) -> RosterStrategy:
        names = sorted(STRATEGIES)
        return STRATEGIES[names[index % len(names)]]()

    def add_roster(self, index: int) -> None:
        strategy = self._strategy_for(index)
        roster = self.engine.create_roster(
            owner_id=f"sim-{index}",
            name=f"{strategy.name.title()} {index + 1}",
            league_id=SIM_LEAGUE_ID,
        )
        self.strategies[roster.roster_id] = strategy
        strategy.draft(self.engine, roster)

    def simulate_race(self, round: int) -> RaceSummary:
        if self.late_joiners and round == self.join_round + 1:
            for i in range(self.late_joiners):
                self.add_roster(self.roster_count + i)

        for roster_id, strategy in self.strategies.items():
            strategy.before_race(self.engine, self.engine.rosters[roster_id], round)

        summary = self.engine.process_race(self.races.simulate(round))
        for callback in self._on_race_complete:
            callback(summary)
        return summary

    def run(self) -> SeasonReport:
        """Simulate the whole season and build the report."""
        for i in range(self.roster_count):
            self.add_roster(i)

        start = self.engine.completed_races + 1
        for round in range(start, self.rounds + 1):
            self.simulate_race(round)

        return self.report()

    def report(self, mover_count: int = 5) -> SeasonReport:
        engine = self.engine
        movers = [
            PriceMover(asset_id, opening, engine.assets[asset_id].price)
            for asset_id, opening in self._opening_prices.items()
        ]
        movers.sort(key=lambda m: (-abs(m.delta), m.asset_id))

        return SeasonReport(
            rounds=engine.completed_races,
            standings=engine.league_standings(SIM_LEAGUE_ID),
            movers=movers[:mover_count],
            trade_count=len(engine.trade_log),
            expiry_count=len(engine.trade_log.get_by_action(TradeAction.SELL_EXPIRY)),
            reserve_fill_count=len(engine.trade_log.get_by_action(TradeAction.RESERVE_FILL)),
        )
