"""
Economy Engine.

The single owner of assets, rosters, contracts and the trade log. All
roster commands and race processing go through here; components never
look each other up through globals.

Race processing runs as one transaction:
    scoring -> pricing -> contract ledger sweep (expiry, lockouts, reserve)
Scoring sees contracts as they stood when the race started, so a
contract with races_held == 0 was acquired for this race. State is
snapshotted first and restored if any step raises, and each round can
only be applied once.
"""

import copy
import logging
import threading
from contextlib import contextmanager, ExitStack
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from paddock.core.config import EconomyConfig, get_config
from paddock.core.contracts.ledger import ContractLedger, SweepOutcome
from paddock.core.enums import AssetKind
from paddock.core.errors import (
    CommandResult,
    ConfigurationError,
    DuplicateAssetError,
    RaceAlreadyProcessedError,
    RaceNotCompleteError,
    RaceOutOfOrderError,
    RejectionReason,
    UnknownAssetError,
)
from paddock.core.league.aggregator import LeagueAggregator, LeagueStanding, race_winners
from paddock.core.models.asset import Asset, create_constructor, create_driver
from paddock.core.models.results import RaceResult
from paddock.core.models.roster import Roster
from paddock.core.pricing.model import PriceChange, PricingModel
from paddock.core.reserve.autofill import ReserveAutoFill
from paddock.core.scoring.engine import RaceScore, ScoringEngine, SeasonTotals, late_joiner_catch_up
from paddock.core.transactions.trade_log import TradeLog, TradeLogEntry
from paddock.core.transfers.engine import SaleQuote, TransferEngine
from paddock.events.bus import EventBus
from paddock.events.types import (
    ContractExpiredEvent,
    EconomyEvent,
    PriceChangedEvent,
    RaceProcessedEvent,
    ReserveFilledEvent,
    TradeExecutedEvent,
)


logger = logging.getLogger(__name__)


@dataclass
class RaceSummary:
    """Everything one processed race changed."""
    round: int
    name: str = ""
    scores: dict[str, RaceScore] = field(default_factory=dict)
    price_changes: list[PriceChange] = field(default_factory=list)
    sweeps: dict[str, SweepOutcome] = field(default_factory=dict)
    winners: dict[str, Optional[str]] = field(default_factory=dict)  # league_id -> roster_id
    rosters: dict[str, dict] = field(default_factory=dict)          # Post-race snapshots

    def points_for(self, roster_id: str) -> int:
        score = self.scores.get(roster_id)
        return score.total if score else 0

    @property
    def expiry_count(self) -> int:
        return sum(len(s.expired) for s in self.sweeps.values())

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "name": self.name,
            "scores": {rid: s.to_dict() for rid, s in self.scores.items()},
            "price_changes": [c.to_dict() for c in self.price_changes if c.delta],
            "sweeps": {rid: s.to_dict() for rid, s in self.sweeps.items()},
            "winners": dict(self.winners),
        }


class EconomyEngine:
    """
    In-memory roster economy.

    Commands against one roster are serialized by a per-roster lock;
    different rosters may be changed in parallel. Race processing holds
    every roster lock for its duration.
    """

    def __init__(self, config: Optional[EconomyConfig] = None, event_bus: Optional[EventBus] = None):
        self.config = config or get_config()
        errors = self.config.validate()
        if errors:
            raise ConfigurationError(errors)

        self.event_bus = event_bus or EventBus()
        self.assets: dict[str, Asset] = {}
        self.rosters: dict[str, Roster] = {}
        self.trade_log = TradeLog()
        self.price_history: list[PriceChange] = []
        self.results: dict[int, RaceResult] = {}
        self.processed_rounds: set[int] = set()

        self.pricing = PricingModel(self.config)
        self.transfers = TransferEngine(self.config, self.assets, self.trade_log)
        self.reserve = ReserveAutoFill(self.config, self.assets, self.transfers)
        self.ledger = ContractLedger(self.config, self.assets, self.transfers, self.reserve)
        self.scoring = ScoringEngine(self.config, self.assets)
        self.league = LeagueAggregator()
        self.season_totals = SeasonTotals()

        self._lock = threading.RLock()
        self._roster_locks: dict[str, threading.RLock] = {}

    @property
    def completed_races(self) -> int:
        return len(self.processed_rounds)

    # =========================================================================
    # Assets
    # =========================================================================

    def register_asset(self, asset: Asset) -> Asset:
        """Add an asset to the market. Asset ids are unique for the season."""
        with self._lock:
            if asset.asset_id in self.assets:
                raise DuplicateAssetError(f"Asset {asset.asset_id} already registered")
            if asset.is_constructor:
                missing = [d for d in asset.driver_ids if d not in self.assets]
                if missing:
                    raise UnknownAssetError(
                        f"Constructor {asset.asset_id} references unknown drivers {missing}"
                    )
            self.assets[asset.asset_id] = asset
            return asset

    def add_driver(
        self,
        asset_id: str,
        name: str,
        previous_season_average: float,
        constructor_id: Optional[str] = None,
    ) -> Asset:
        """Register a driver priced from last season's per-race average."""
        price = self.pricing.initial_price(previous_season_average)
        return self.register_asset(create_driver(asset_id, name, price, constructor_id))

    def add_constructor(
        self,
        asset_id: str,
        name: str,
        previous_season_average: float,
        driver_ids: tuple[str, str],
    ) -> Asset:
        """Register a constructor priced from last season's per-race average."""
        price = self.pricing.initial_price(previous_season_average)
        return self.register_asset(create_constructor(asset_id, name, price, driver_ids))

    def get_asset(self, asset_id: str) -> Optional[Asset]:
        return self.assets.get(asset_id)

    def list_assets(self, kind: Optional[AssetKind] = None) -> list[Asset]:
        assets = [a for a in self.assets.values() if kind is None or a.kind == kind]
        return sorted(assets, key=lambda a: (-a.price, a.asset_id))

    def price_history_for(self, asset_id: str) -> list[PriceChange]:
        return [c for c in self.price_history if c.asset_id == asset_id]

    # =========================================================================
    # Rosters
    # =========================================================================

    def create_roster(
        self,
        owner_id: str,
        name: str,
        league_id: Optional[str] = None,
    ) -> Roster:
        """
        Create an empty roster with the starting budget.

        Rosters created after races have run get the late-joiner catch-up
        once, here.
        """
        with self._lock:
            joined = self.completed_races
            catch_up = late_joiner_catch_up(joined, self.config)
            roster = Roster(
                owner_id=owner_id,
                name=name,
                budget=self.config.starting_budget,
                league_id=league_id,
                joined_at_race=joined,
                catch_up_points=catch_up,
                total_points=catch_up,
            )
            self.rosters[roster.roster_id] = roster
            self._roster_locks[roster.roster_id] = threading.RLock()

        if catch_up:
            logger.info(f"Roster {name} joined after {joined} races, catch-up {catch_up} pts")
        else:
            logger.info(f"Roster {name} created for {owner_id}")
        return roster

    def get_roster(self, roster_id: str) -> Optional[Roster]:
        return self.rosters.get(roster_id)

    def rosters_in_league(self, league_id: str) -> list[Roster]:
        return [r for r in self.rosters.values() if r.league_id == league_id]

    @contextmanager
    def roster_lock(self, roster_id: str) -> Iterator[None]:
        """Serialize mutations of one roster."""
        with self._lock:
            lock = self._roster_locks.setdefault(roster_id, threading.RLock())
        with lock:
            yield

    # =========================================================================
    # Commands
    # =========================================================================

    def _command(self, roster_id: str, action: Callable[[Roster], CommandResult]) -> CommandResult:
        roster = self.rosters.get(roster_id)
        if roster is None:
            return CommandResult.rejected(RejectionReason.NOT_FOUND, f"Roster {roster_id} not found")

        with self.roster_lock(roster_id):
            result = action(roster)

        if not result.ok:
            logger.warning(f"{roster.name}: rejected ({result.reason.value}) {result.message}")
            return result
        if result.entry is not None:
            self.event_bus.emit(TradeExecutedEvent(
                round=self.completed_races, entry=result.entry, roster_id=roster_id,
            ))
        return result

    def buy(self, roster_id: str, asset_id: str) -> CommandResult:
        return self._command(
            roster_id, lambda r: self.transfers.buy(r, asset_id, self.completed_races)
        )

    def sell(self, roster_id: str, asset_id: str) -> CommandResult:
        return self._command(
            roster_id, lambda r: self.transfers.sell(r, asset_id, self.completed_races)
        )

    def swap(self, roster_id: str, old_asset_id: str, new_asset_id: str) -> CommandResult:
        return self._command(
            roster_id,
            lambda r: self.transfers.swap(r, old_asset_id, new_asset_id, self.completed_races),
        )

    def set_ace(self, roster_id: str, asset_id: str) -> CommandResult:
        return self._command(roster_id, lambda r: self.transfers.set_ace(r, asset_id))

    def clear_ace(self, roster_id: str) -> CommandResult:
        return self._command(roster_id, self.transfers.clear_ace)

    def quote_sale(self, roster_id: str, asset_id: str) -> Optional[SaleQuote]:
        """What selling a held asset would pay right now, without selling."""
        roster = self.rosters.get(roster_id)
        if roster is None:
            return None
        contract = roster.get_contract(asset_id)
        return self.transfers.quote_sale(contract) if contract else None

    # =========================================================================
    # Race processing
    # =========================================================================

    def _check_result(self, result: RaceResult) -> None:
        if not result.is_complete:
            raise RaceNotCompleteError(f"Round {result.round} is not marked complete")
        if result.round in self.processed_rounds:
            raise RaceAlreadyProcessedError(f"Round {result.round} was already processed")
        expected = self.completed_races + 1
        if result.round != expected:
            raise RaceOutOfOrderError(f"Expected round {expected}, got round {result.round}")

        unknown = sorted(d for d in result.driver_ids if d not in self.assets)
        if unknown:
            logger.warning(f"Round {result.round}: ignoring results for unknown assets {unknown}")

    def _snapshot(self) -> tuple:
        return (
            copy.deepcopy(self.assets),
            copy.deepcopy(self.rosters),
            len(self.trade_log.entries),
            len(self.price_history),
            set(self.processed_rounds),
            dict(self.results),
        )

    def _restore(self, snapshot: tuple) -> None:
        assets, rosters, trade_count, price_count, processed, results = snapshot
        # Callers and components hold references: restore objects in place
        for asset_id, saved in assets.items():
            self.assets[asset_id].__dict__.update(saved.__dict__)
        for roster_id, saved in rosters.items():
            self.rosters[roster_id].__dict__.update(saved.__dict__)
        del self.trade_log.entries[trade_count:]
        del self.price_history[price_count:]
        self.processed_rounds.clear()
        self.processed_rounds.update(processed)
        self.results.clear()
        self.results.update(results)
        self.season_totals.invalidate()

    def _apply_score(self, roster: Roster, score: RaceScore) -> None:
        for contract_score in score.contracts:
            contract = roster.get_contract(contract_score.asset_id)
            if contract is not None:
                contract.credit(contract_score.total)
        roster.race_history[score.round] = score.total
        roster.total_points += score.total
        roster.races_since_transfer = score.stale_counter
        roster.penalty_points += score.stale_penalty
        roster.touch()

    def process_race(self, result: RaceResult) -> RaceSummary:
        """
        Apply a completed race to every asset and roster.

        Raises RaceProcessingError subclasses for results that are
        incomplete, already applied or out of order. Nothing is changed
        when it raises.
        """
        with self._lock, ExitStack() as stack:
            self._check_result(result)
            for roster_id in sorted(self.rosters):
                stack.enter_context(self.roster_lock(roster_id))

            snapshot = self._snapshot()
            events: list[EconomyEvent] = []
            try:
                summary = self._run_race(result, events)
            except Exception:
                logger.exception(f"Round {result.round} failed, restoring state")
                self._restore(snapshot)
                raise

        for event in events:
            self.event_bus.emit(event)
        return summary

    def _run_race(self, result: RaceResult, events: list[EconomyEvent]) -> RaceSummary:
        rnd = result.round
        summary = RaceSummary(round=rnd, name=result.name)
        logger.info(f"Processing round {rnd} {result.name}".rstrip())

        # 1. Scoring, against contracts as they stood at the start of the race
        for roster in self.rosters.values():
            score = self.scoring.score_race(roster, result)
            self._apply_score(roster, score)
            summary.scores[roster.roster_id] = score

        # 2. Pricing
        for asset in self.assets.values():
            if not asset.is_active:
                continue
            points = self.scoring.asset_points(asset, result)
            change = self.pricing.apply_race(asset, points, result.has_sprint, rnd)
            self.price_history.append(change)
            summary.price_changes.append(change)
            if change.delta:
                events.append(PriceChangedEvent(round=rnd, change=change))

        self.processed_rounds.add(rnd)
        self.results[rnd] = copy.deepcopy(result)

        # 3. Contract ledger sweep
        for roster in self.rosters.values():
            outcome = self.ledger.sweep(roster, rnd)
            summary.sweeps[roster.roster_id] = outcome
            self._collect_sweep_events(roster, outcome, rnd, events)

        # 4. League winners for this round
        for league_id in sorted({r.league_id for r in self.rosters.values() if r.league_id}):
            series = {r.roster_id: {rnd: r.race_history.get(rnd, 0)}
                      for r in self.rosters_in_league(league_id)}
            summary.winners[league_id] = race_winners(series).get(rnd)

        for roster in self.rosters.values():
            summary.rosters[roster.roster_id] = roster.to_dict()

        events.append(RaceProcessedEvent(
            round=rnd,
            race_name=result.name,
            roster_points={rid: s.total for rid, s in summary.scores.items()},
            winners=dict(summary.winners),
        ))
        logger.info(
            f"Round {rnd} done: {len(summary.scores)} rosters scored, "
            f"{sum(1 for c in summary.price_changes if c.delta)} price moves, "
            f"{summary.expiry_count} expiries"
        )
        return summary

    def _collect_sweep_events(self, roster: Roster, outcome: SweepOutcome, rnd: int,
                              events: list[EconomyEvent]) -> None:
        for contract, entry in zip(outcome.expired, outcome.expiry_entries):
            events.append(ContractExpiredEvent(
                round=rnd,
                roster_id=roster.roster_id,
                asset_id=contract.asset_id,
                proceeds=entry.proceeds,
                banked_points=contract.points_scored,
                lockout_expires_at=roster.lockout_expiry(contract.asset_id),
            ))
            events.append(TradeExecutedEvent(round=rnd, entry=entry, roster_id=roster.roster_id))
        if outcome.reserve_entries:
            events.append(ReserveFilledEvent(
                round=rnd,
                roster_id=roster.roster_id,
                asset_ids=[e.asset_id for e in outcome.reserve_entries],
                slots_still_empty=max(0, self.config.roster_size - roster.driver_count),
            ))
            for entry in outcome.reserve_entries:
                events.append(TradeExecutedEvent(round=rnd, entry=entry, roster_id=roster.roster_id))

    # =========================================================================
    # Totals and league views
    # =========================================================================

    def season_total(self, roster_id: str) -> int:
        """Season total recomputed from race history, memoized per race count."""
        roster = self.rosters[roster_id]
        return self.season_totals.get(roster, self.completed_races)

    def race_wins(self, league_id: str) -> dict[str, int]:
        return self.league.race_wins(self.rosters_in_league(league_id))

    def league_standings(self, league_id: str) -> list[LeagueStanding]:
        rosters = self.rosters_in_league(league_id)
        totals = {r.roster_id: self.season_total(r.roster_id) for r in rosters}
        return self.league.standings(rosters, totals)

    def trades_for(self, roster_id: str) -> list[TradeLogEntry]:
        return self.trade_log.get_by_roster(roster_id)

    def to_dict(self) -> dict:
        """Full engine snapshot for the persistence collaborator."""
        return {
            "config": self.config.to_dict(),
            "completed_races": self.completed_races,
            "assets": {aid: a.to_dict() for aid, a in self.assets.items()},
            "rosters": {rid: r.to_dict() for rid, r in self.rosters.items()},
            "trade_log": self.trade_log.to_dict(),
        }
