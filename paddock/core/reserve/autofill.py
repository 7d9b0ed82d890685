"""
Reserve Auto-Fill.

After expiries leave driver slots empty, buys the cheapest eligible
drivers the roster can afford until it is full again. Runs only once
every driver lockout has cleared, and only for rosters that have held a
driver before; a roster still being drafted by its owner is left alone.
Running short because nothing is affordable is an accepted state.
"""

import logging
from typing import Iterable, Optional, TYPE_CHECKING

from paddock.core.enums import SlotStatus

if TYPE_CHECKING:
    from paddock.core.config import EconomyConfig
    from paddock.core.models.asset import Asset
    from paddock.core.models.roster import Roster
    from paddock.core.transactions.trade_log import TradeLogEntry
    from paddock.core.transfers.engine import TransferEngine


logger = logging.getLogger(__name__)


class ReserveAutoFill:
    """Greedy cheapest-first reserve picks."""

    def __init__(self, config: "EconomyConfig", assets: dict[str, "Asset"], transfers: "TransferEngine"):
        self.config = config
        self.assets = assets
        self.transfers = transfers

    def should_fill(self, roster: "Roster", completed_races: int) -> bool:
        if not roster.has_held_driver:
            return False
        statuses = {slot.status for slot in roster.slots(completed_races, self.config.roster_size)}
        return SlotStatus.EMPTY in statuses and SlotStatus.PENDING_LOCKOUT not in statuses

    def candidates(
        self,
        roster: "Roster",
        completed_races: int,
        exclude: Optional[Iterable[str]] = None,
    ) -> list["Asset"]:
        """Active drivers the roster could buy, cheapest first."""
        excluded = set(exclude or ())
        pool = [
            a for a in self.assets.values()
            if a.is_driver
            and a.is_active
            and a.asset_id not in excluded
            and not roster.holds(a.asset_id)
            and not roster.is_locked_out(a.asset_id, completed_races)
        ]
        return sorted(pool, key=lambda a: (a.price, a.asset_id))

    def fill(
        self,
        roster: "Roster",
        completed_races: int,
        exclude: Optional[Iterable[str]] = None,
    ) -> list["TradeLogEntry"]:
        """Fill empty driver slots. Returns the trade-log entries written."""
        entries = []
        for candidate in self.candidates(roster, completed_races, exclude):
            if roster.driver_count >= self.config.roster_size:
                break
            if candidate.price > roster.budget:
                # Sorted by price: nothing further is affordable either
                break
            result = self.transfers.buy(
                roster, candidate.asset_id, completed_races,
                is_reserve_pick=True,
                reason="Reserve auto-fill after contract expiry",
            )
            if result.ok:
                entries.append(result.entry)

        if entries:
            logger.info(
                f"{roster.name}: reserve picks {[e.asset_id for e in entries]} "
                f"(budget left {roster.budget})"
            )
        if roster.driver_count < self.config.roster_size:
            logger.info(
                f"{roster.name}: {self.config.roster_size - roster.driver_count} "
                f"driver slot(s) left empty, nothing affordable"
            )
        return entries
