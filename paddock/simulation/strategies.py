"""
Simulated roster owners.

Each strategy drafts a roster at the start and may trade before every
race. Strategies only use the public engine commands, so they exercise
the same paths a real client would.
"""

import logging
from typing import Optional, TYPE_CHECKING

from paddock.core.enums import AssetKind

if TYPE_CHECKING:
    from paddock.core.economy import EconomyEngine
    from paddock.core.models.asset import Asset
    from paddock.core.models.roster import Roster


logger = logging.getLogger(__name__)


def form(asset: "Asset") -> float:
    """Mean of recent race totals, 0 with no history."""
    if not asset.recent_points:
        return 0.0
    return sum(asset.recent_points) / len(asset.recent_points)


class RosterStrategy:
    """Base strategy: draft by preference, pick the best-form ace, never trade."""

    name = "passive"

    def rank_drivers(self, engine: "EconomyEngine") -> list["Asset"]:
        return engine.list_assets(AssetKind.DRIVER)

    def rank_constructors(self, engine: "EconomyEngine") -> list["Asset"]:
        return engine.list_assets(AssetKind.CONSTRUCTOR)

    def draft(self, engine: "EconomyEngine", roster: "Roster") -> None:
        """Buy a constructor and a full set of drivers within budget."""
        size = engine.config.roster_size
        cheapest = sorted(a.price for a in engine.list_assets(AssetKind.DRIVER))

        for constructor in self.rank_constructors(engine):
            if constructor.price + sum(cheapest[:size]) <= roster.budget:
                if engine.buy(roster.roster_id, constructor.asset_id):
                    break

        for driver in self.rank_drivers(engine):
            slots_left = size - roster.driver_count
            if slots_left <= 0:
                break
            others = sorted(
                a.price for a in engine.list_assets(AssetKind.DRIVER)
                if a.asset_id != driver.asset_id and not roster.holds(a.asset_id)
            )
            reserve = sum(others[:slots_left - 1])
            if driver.price + reserve <= roster.budget:
                engine.buy(roster.roster_id, driver.asset_id)

    def pick_ace(self, engine: "EconomyEngine", roster: "Roster") -> Optional[str]:
        ceiling = engine.config.ace_price_ceiling
        eligible = []
        for contract in roster.iter_contracts():
            asset = engine.get_asset(contract.asset_id)
            if asset.price > ceiling:
                continue
            if asset.is_constructor and not engine.config.ace_allows_constructor:
                continue
            eligible.append(asset)
        if not eligible:
            return None
        return max(eligible, key=lambda a: (form(a), -a.price, a.asset_id)).asset_id

    def trade(self, engine: "EconomyEngine", roster: "Roster", round: int) -> None:
        pass

    def before_race(self, engine: "EconomyEngine", roster: "Roster", round: int) -> None:
        self.trade(engine, roster, round)
        ace = self.pick_ace(engine, roster)
        if ace is None:
            if roster.ace is not None:
                engine.clear_ace(roster.roster_id)
        elif roster.ace is None or roster.ace.asset_id != ace:
            engine.set_ace(roster.roster_id, ace)


class StarsStrategy(RosterStrategy):
    """Spend on the most expensive drivers first, fill with whatever is left."""

    name = "stars"


class ValueStrategy(RosterStrategy):
    """Prefer cheap drivers in form; swaps the weakest driver every few races."""

    name = "value"
    trade_every = 3

    def rank_drivers(self, engine: "EconomyEngine") -> list["Asset"]:
        drivers = engine.list_assets(AssetKind.DRIVER)
        return sorted(drivers, key=lambda a: (-(form(a) + 1) / max(a.price, 1), a.asset_id))

    def rank_constructors(self, engine: "EconomyEngine") -> list["Asset"]:
        constructors = engine.list_assets(AssetKind.CONSTRUCTOR)
        return sorted(constructors, key=lambda a: (a.price, a.asset_id))

    def trade(self, engine: "EconomyEngine", roster: "Roster", round: int) -> None:
        if round % self.trade_every != 0 or not roster.drivers:
            return
        held = [engine.get_asset(c.asset_id) for c in roster.drivers]
        worst = min(held, key=lambda a: (form(a), a.asset_id))
        quote = engine.quote_sale(roster.roster_id, worst.asset_id)
        spendable = roster.budget + (quote.proceeds if quote else 0)
        for candidate in self.rank_drivers(engine):
            if roster.holds(candidate.asset_id) or candidate.price > spendable:
                continue
            if roster.is_locked_out(candidate.asset_id, engine.completed_races):
                continue
            if form(candidate) <= form(worst):
                break
            result = engine.swap(roster.roster_id, worst.asset_id, candidate.asset_id)
            if result.ok:
                logger.debug(f"{roster.name}: swapped {worst.asset_id} for {candidate.asset_id}")
                return


class ProfitTakerStrategy(RosterStrategy):
    """Sells appreciated drivers just before their contract runs out."""

    name = "profit_taker"

    def trade(self, engine: "EconomyEngine", roster: "Roster", round: int) -> None:
        for contract in list(roster.drivers):
            if contract.races_remaining == 1 and contract.profit >= 20:
                sold = engine.sell(roster.roster_id, contract.asset_id)
                if not sold:
                    continue
                for candidate in engine.list_assets(AssetKind.DRIVER):
                    if candidate.asset_id == contract.asset_id or roster.holds(candidate.asset_id):
                        continue
                    if roster.is_locked_out(candidate.asset_id, engine.completed_races):
                        continue
                    if candidate.price <= roster.budget and engine.buy(roster.roster_id, candidate.asset_id):
                        break


STRATEGIES: dict[str, type[RosterStrategy]] = {
    cls.name: cls for cls in (RosterStrategy, StarsStrategy, ValueStrategy, ProfitTakerStrategy)
}
