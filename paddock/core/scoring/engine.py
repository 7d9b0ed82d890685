"""
Scoring Engine.

Turns one completed race into roster points. Per held contract:

    base   = race + sprint points (constructors: both drivers combined)
    points = base * ace_multiplier        if ace and price <= ace ceiling
    points += podium or threshold bonus   if the contract is new this race

The ace multiplier is applied first; the hot-hand bonus is added
afterwards and never multiplied. The roster then pays the stale-roster
penalty for every race beyond the threshold without a transfer.

Scoring is pure: `score_race` reads the roster and returns a RaceScore,
the EconomyEngine applies it.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from paddock.core.enums import AssetKind
from paddock.core.pricing.model import round_half_up

if TYPE_CHECKING:
    from paddock.core.config import EconomyConfig
    from paddock.core.contracts.contract import Contract
    from paddock.core.models.asset import Asset
    from paddock.core.models.results import RaceResult
    from paddock.core.models.roster import Roster


logger = logging.getLogger(__name__)


@dataclass
class ContractScore:
    """One contract's contribution to a race."""
    asset_id: str
    kind: AssetKind
    base_points: int
    ace_applied: bool = False
    multiplied_points: int = 0
    hot_hand_bonus: int = 0

    @property
    def total(self) -> int:
        return self.multiplied_points + self.hot_hand_bonus

    def to_dict(self) -> dict:
        return {
            "asset_id": self.asset_id,
            "kind": self.kind.value,
            "base_points": self.base_points,
            "ace_applied": self.ace_applied,
            "multiplied_points": self.multiplied_points,
            "hot_hand_bonus": self.hot_hand_bonus,
            "total": self.total,
        }


@dataclass
class RaceScore:
    """
    A roster's score for one race.

    `total` is what the race adds to the season. `locked_points` is the
    roster's banked running total at scoring time; it is reported
    alongside, never added to the season twice.
    """
    roster_id: str
    round: int
    contracts: list[ContractScore] = field(default_factory=list)
    stale_counter: int = 0
    stale_penalty: int = 0
    locked_points: int = 0

    @property
    def contract_points(self) -> int:
        return sum(c.total for c in self.contracts)

    @property
    def total(self) -> int:
        return self.contract_points - self.stale_penalty

    @property
    def total_with_locked(self) -> int:
        return self.total + self.locked_points

    def for_asset(self, asset_id: str) -> Optional[ContractScore]:
        return next((c for c in self.contracts if c.asset_id == asset_id), None)

    def to_dict(self) -> dict:
        return {
            "roster_id": self.roster_id,
            "round": self.round,
            "contracts": [c.to_dict() for c in self.contracts],
            "stale_counter": self.stale_counter,
            "stale_penalty": self.stale_penalty,
            "locked_points": self.locked_points,
            "total": self.total,
        }


def late_joiner_catch_up(joined_at_race: int, config: "EconomyConfig") -> int:
    """Flat catch-up for races missed before joining. Awarded once."""
    return max(0, joined_at_race) * config.late_joiner_points_per_race


class ScoringEngine:
    """Scores rosters against race results under one rule configuration."""

    def __init__(self, config: "EconomyConfig", assets: dict[str, "Asset"]):
        self.config = config
        self.assets = assets

    # =========================================================================
    # Per-asset points
    # =========================================================================

    def asset_points(self, asset: "Asset", result: "RaceResult") -> int:
        """Raw race (plus sprint) points of an asset. Constructors sum both drivers."""
        bonus = self.config.fastest_lap_bonus
        if asset.is_constructor:
            return result.combined_points(asset.driver_ids, bonus)
        return result.driver_points(asset.asset_id, bonus)

    def _on_podium(self, asset: "Asset", result: "RaceResult") -> bool:
        if asset.is_constructor:
            return any(result.is_podium(d) for d in asset.driver_ids)
        return result.is_podium(asset.asset_id)

    def hot_hand_bonus(self, contract: "Contract", asset: "Asset", base_points: int, result: "RaceResult") -> int:
        """Bonus for a contract scoring in its first race. Podium beats threshold."""
        if contract.races_held != 0:
            return 0
        if contract.kind == AssetKind.CONSTRUCTOR and not self.config.constructor_hot_hand:
            return 0
        if self._on_podium(asset, result):
            return self.config.hot_hand_podium_bonus
        if base_points >= self.config.hot_hand_threshold:
            return self.config.hot_hand_bonus
        return 0

    def _ace_applies(self, roster: "Roster", contract: "Contract", asset: "Asset") -> bool:
        ace = roster.ace
        if ace is None or ace.asset_id != contract.asset_id:
            return False
        if contract.kind == AssetKind.CONSTRUCTOR and not self.config.ace_allows_constructor:
            return False
        return asset.price <= self.config.ace_price_ceiling

    def score_contract(self, roster: "Roster", contract: "Contract", result: "RaceResult") -> Optional[ContractScore]:
        """Score one contract, or None if it was acquired after the race."""
        if contract.added_at_race >= result.round:
            return None
        asset = self.assets.get(contract.asset_id)
        if asset is None:
            return None

        base = self.asset_points(asset, result)
        score = ContractScore(asset_id=contract.asset_id, kind=contract.kind, base_points=base)
        score.multiplied_points = base
        if self._ace_applies(roster, contract, asset):
            score.ace_applied = True
            score.multiplied_points = round_half_up(base * self.config.ace_multiplier)
        score.hot_hand_bonus = self.hot_hand_bonus(contract, asset, base, result)
        return score

    # =========================================================================
    # Roster scoring
    # =========================================================================

    def stale_penalty(self, races_since_transfer: int) -> int:
        """Penalty for the race that brought the counter to this value."""
        if races_since_transfer > self.config.stale_roster_threshold:
            return self.config.stale_roster_penalty
        return 0

    def score_race(self, roster: "Roster", result: "RaceResult") -> RaceScore:
        """Score a roster for one race without mutating anything."""
        counter = roster.races_since_transfer + 1
        score = RaceScore(
            roster_id=roster.roster_id,
            round=result.round,
            stale_counter=counter,
            stale_penalty=self.stale_penalty(counter),
            locked_points=roster.locked_points,
        )
        for contract in roster.iter_contracts():
            contract_score = self.score_contract(roster, contract, result)
            if contract_score is not None:
                score.contracts.append(contract_score)

        logger.debug(f"{roster.name} round {result.round}: {score.total} pts "
                     f"(penalty {score.stale_penalty})")
        return score


class SeasonTotals:
    """
    Season totals recomputed from race history.

    The recomputation walks every race the roster scored, so results are
    memoized per roster on (completed races, roster revision).
    """

    def __init__(self):
        self._cache: dict[str, tuple[int, int, int]] = {}
        self.computations = 0

    @staticmethod
    def compute(roster: "Roster") -> int:
        """Race points across the season plus value-capture and catch-up points."""
        return sum(roster.race_history.values()) + roster.bonus_points + roster.catch_up_points

    @staticmethod
    def from_contracts(roster: "Roster") -> int:
        """Same total rebuilt from contract balances instead of race history."""
        held = sum(c.points_scored for c in roster.iter_contracts())
        return (held + roster.locked_points - roster.penalty_points
                + roster.bonus_points + roster.catch_up_points)

    def get(self, roster: "Roster", completed_races: int) -> int:
        cached = self._cache.get(roster.roster_id)
        if cached is not None and cached[0] == completed_races and cached[1] == roster.revision:
            return cached[2]
        total = self.compute(roster)
        self.computations += 1
        self._cache[roster.roster_id] = (completed_races, roster.revision, total)
        return total

    def invalidate(self, roster_id: Optional[str] = None) -> None:
        if roster_id is None:
            self._cache.clear()
        else:
            self._cache.pop(roster_id, None)
