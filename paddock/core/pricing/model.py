"""
Pricing Model.

Converts a rolling window of recent per-race points into a bounded,
rate-limited market price:

    average = weighted mean of the last `rolling_window` race totals
              (sprint weekends weighted at `sprint_weight`)
    target  = round(average * dollars_per_point)
    price   = clamp(price + clamp(target - price, +/- max_change), min, max)

The model only touches an asset's price fields and rolling history.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from paddock.core.enums import PriceTier

if TYPE_CHECKING:
    from paddock.core.config import EconomyConfig
    from paddock.core.models.asset import Asset


logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def rolling_average(points: list[int], sprint_flags: list[bool], sprint_weight: float) -> float:
    """
    Weighted average of recent race totals.

    Returns 0.0 for an empty history.
    """
    weighted_sum = 0.0
    weight_sum = 0.0
    for value, is_sprint in zip(points, sprint_flags):
        weight = sprint_weight if is_sprint else 1.0
        weighted_sum += value * weight
        weight_sum += weight
    if weight_sum == 0:
        return 0.0
    return weighted_sum / weight_sum


def price_tier(price: int, tier_a_threshold: int = 100, tier_b_threshold: int = 50) -> PriceTier:
    """A above the A threshold, B above the B threshold, C otherwise."""
    if price > tier_a_threshold:
        return PriceTier.A
    if price > tier_b_threshold:
        return PriceTier.B
    return PriceTier.C


@dataclass
class PriceChange:
    """One asset's price move after a race."""
    asset_id: str
    round: int
    previous_price: int
    new_price: int
    target_price: int
    rolling_average: float
    race_points: int

    @property
    def delta(self) -> int:
        return self.new_price - self.previous_price

    @property
    def was_capped(self) -> bool:
        """True if the rate limit or price bounds held the price short of target."""
        return self.new_price != self.target_price

    def to_dict(self) -> dict:
        return {
            "asset_id": self.asset_id,
            "round": self.round,
            "previous_price": self.previous_price,
            "new_price": self.new_price,
            "delta": self.delta,
            "target_price": self.target_price,
            "rolling_average": round(self.rolling_average, 3),
            "race_points": self.race_points,
        }


class PricingModel:
    """Applies race results to asset prices under one rule configuration."""

    def __init__(self, config: "EconomyConfig"):
        self.config = config

    def target_price(self, average: float) -> int:
        return round_half_up(average * self.config.dollars_per_point)

    def initial_price(self, previous_season_average: float) -> int:
        """Opening price from a prior-season per-race average. Not rate limited."""
        target = self.target_price(previous_season_average)
        return clamp(target, self.config.min_price, self.config.max_price)

    def initial_price_from_season_total(self, season_total: float) -> int:
        """Opening price from a prior-season points total."""
        return self.initial_price(season_total / self.config.races_per_season)

    def next_price(self, current_price: int, target: int) -> int:
        cap = self.config.max_change_per_race
        change = clamp(target - current_price, -cap, cap)
        return clamp(current_price + change, self.config.min_price, self.config.max_price)

    def tier(self, price: int) -> PriceTier:
        return price_tier(price, self.config.tier_a_threshold, self.config.tier_b_threshold)

    def apply_race(
        self,
        asset: "Asset",
        race_points: int,
        is_sprint: bool = False,
        round: Optional[int] = None,
    ) -> PriceChange:
        """
        Record a race total on the asset and move its price.

        Mutates the asset's rolling history, season points and price.
        """
        window = self.config.rolling_window
        asset.recent_points = ([race_points] + asset.recent_points)[:window]
        asset.recent_sprint_flags = ([is_sprint] + asset.recent_sprint_flags)[:window]
        asset.season_points += race_points

        average = rolling_average(asset.recent_points, asset.recent_sprint_flags,
                                  self.config.sprint_weight)
        target = self.target_price(average)
        previous = asset.price
        new_price = self.next_price(previous, target)

        asset.previous_price = previous
        asset.price = new_price

        change = PriceChange(
            asset_id=asset.asset_id,
            round=round if round is not None else 0,
            previous_price=previous,
            new_price=new_price,
            target_price=target,
            rolling_average=average,
            race_points=race_points,
        )
        if change.delta:
            logger.debug(
                f"{asset.asset_id}: {previous} -> {new_price} "
                f"(avg {average:.2f}, target {target})"
            )
        return change
