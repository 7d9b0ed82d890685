"""
Contract Ledger.

Runs the per-roster expiry and lockout sweep once per completed race:

1. Advance races_held on every held contract.
2. Expire contracts that reached their length: automatic sale at market
   price, points banked, lockout registered, ace cleared.
3. Prune lockouts that have run out.
4. Hand over to reserve auto-fill when driver slots are empty and no
   driver lockout is pending.

The sweep is idempotent with respect to contracts already gone from the
roster: they are skipped, not treated as errors.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from paddock.core.config import EconomyConfig
    from paddock.core.contracts.contract import Contract
    from paddock.core.models.asset import Asset
    from paddock.core.models.roster import Roster
    from paddock.core.reserve.autofill import ReserveAutoFill
    from paddock.core.transactions.trade_log import TradeLogEntry
    from paddock.core.transfers.engine import TransferEngine


logger = logging.getLogger(__name__)


@dataclass
class SweepOutcome:
    """What one roster's sweep did."""
    roster_id: str
    expired: list["Contract"] = field(default_factory=list)
    expiry_entries: list["TradeLogEntry"] = field(default_factory=list)
    released_lockouts: list[str] = field(default_factory=list)
    reserve_entries: list["TradeLogEntry"] = field(default_factory=list)

    @property
    def expired_ids(self) -> list[str]:
        return [c.asset_id for c in self.expired]

    def to_dict(self) -> dict:
        return {
            "roster_id": self.roster_id,
            "expired": self.expired_ids,
            "released_lockouts": list(self.released_lockouts),
            "reserve_fills": [e.asset_id for e in self.reserve_entries],
        }


class ContractLedger:
    """Expiry and lockout bookkeeping for rosters."""

    def __init__(
        self,
        config: "EconomyConfig",
        assets: dict[str, "Asset"],
        transfers: "TransferEngine",
        reserve: Optional["ReserveAutoFill"] = None,
    ):
        self.config = config
        self.assets = assets
        self.transfers = transfers
        self.reserve = reserve

    def sweep(self, roster: "Roster", completed_races: int) -> SweepOutcome:
        """Run the post-race sweep. `completed_races` includes the race just run."""
        outcome = SweepOutcome(roster_id=roster.roster_id)

        for contract in roster.contracts:
            contract.advance()

        for contract in roster.contracts:
            if not contract.is_expired:
                continue
            entry = self.transfers.release_expired(roster, contract, completed_races)
            if entry is None:
                continue
            roster.add_lockout(
                contract.asset_id,
                contract.kind,
                completed_races + self.config.lockout_races,
            )
            outcome.expired.append(contract)
            outcome.expiry_entries.append(entry)
            logger.info(
                f"{roster.name}: contract on {contract.asset_id} expired after "
                f"{contract.races_held} races, banked {contract.points_scored} pts"
            )

        outcome.released_lockouts = roster.prune_lockouts(completed_races)

        if self.reserve is not None and self.reserve.should_fill(roster, completed_races):
            outcome.reserve_entries = self.reserve.fill(
                roster, completed_races, exclude=set(outcome.expired_ids)
            )

        self.sync_prices(roster)
        return outcome

    def sync_prices(self, roster: "Roster") -> None:
        """Copy current market prices onto held contracts."""
        for contract in roster.iter_contracts():
            asset = self.assets.get(contract.asset_id)
            if asset is not None:
                contract.sync_price(asset.price)
