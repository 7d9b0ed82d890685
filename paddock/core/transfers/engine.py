"""
Transfer Engine.

Buy, sell and swap against a roster, plus ace designation. Every command
either applies completely or returns a rejected CommandResult with the
roster untouched; validation always finishes before the first mutation.

Sale pricing:
- early termination (contract still running): price - fee, fee = min(price, floor(price * rate * races_remaining))
- otherwise: floor(price * (1 - commission))
- value capture: floor((price - purchase_price) / 10) * value_capture_rate when price rose
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from paddock.core.contracts.contract import Contract
from paddock.core.enums import AssetKind, TradeAction
from paddock.core.errors import CommandResult, RejectionReason
from paddock.core.models.roster import AceDesignation
from paddock.core.transactions.trade_log import TradeLog, TradeLogEntry

if TYPE_CHECKING:
    from paddock.core.config import EconomyConfig
    from paddock.core.models.asset import Asset
    from paddock.core.models.roster import Roster


logger = logging.getLogger(__name__)

# Profit is paid out in whole units of this many dollars
VALUE_CAPTURE_UNIT = 10


def floor_int(value: float) -> int:
    """Floor that tolerates float noise such as 12.999999999."""
    return int(math.floor(value + 1e-9))


@dataclass
class SaleQuote:
    """What releasing a contract right now would pay."""
    price: int
    proceeds: int
    fee: int
    value_capture_bonus: int
    early_termination: bool

    def to_dict(self) -> dict:
        return {
            "price": self.price,
            "proceeds": self.proceeds,
            "fee": self.fee,
            "value_capture_bonus": self.value_capture_bonus,
            "early_termination": self.early_termination,
        }


class TransferEngine:
    """Applies roster transfers against shared assets and the trade log."""

    def __init__(self, config: "EconomyConfig", assets: dict[str, "Asset"], trade_log: TradeLog):
        self.config = config
        self.assets = assets
        self.trade_log = trade_log

    # =========================================================================
    # Pricing helpers
    # =========================================================================

    def value_capture_bonus(self, purchase_price: int, sale_price: int) -> int:
        profit = sale_price - purchase_price
        if profit <= 0:
            return 0
        return (profit // VALUE_CAPTURE_UNIT) * self.config.value_capture_rate

    def early_termination_fee(self, price: int, races_remaining: int) -> int:
        return floor_int(price * self.config.early_termination_rate * races_remaining)

    def commission_proceeds(self, price: int) -> int:
        return floor_int(price * (1 - self.config.sale_commission_rate))

    def quote_sale(self, contract: Contract) -> SaleQuote:
        """Proceeds, fee and bonus for selling a contract at its market price."""
        price = self._market_price(contract)
        remaining = contract.races_remaining
        early = (self.config.contracts_enabled and remaining > 0
                 and self.config.early_termination_rate > 0)
        if early:
            fee = min(self.early_termination_fee(price, remaining), price)
            proceeds = price - fee
        else:
            fee = 0
            proceeds = self.commission_proceeds(price)
        return SaleQuote(
            price=price,
            proceeds=proceeds,
            fee=fee,
            value_capture_bonus=self.value_capture_bonus(contract.purchase_price, price),
            early_termination=early,
        )

    def _market_price(self, contract: Contract) -> int:
        asset = self.assets.get(contract.asset_id)
        return asset.price if asset is not None else contract.current_price

    # =========================================================================
    # Validation
    # =========================================================================

    def _check_acquirable(
        self,
        roster: "Roster",
        asset_id: str,
        completed_races: int,
    ) -> tuple[Optional["Asset"], Optional[CommandResult]]:
        """Checks shared by buy and swap: existence, duplicates, lockouts."""
        asset = self.assets.get(asset_id)
        if asset is None or not asset.is_active:
            return None, CommandResult.rejected(
                RejectionReason.NOT_FOUND, f"Asset {asset_id} not found"
            )
        if roster.holds(asset_id):
            return None, CommandResult.rejected(
                RejectionReason.DUPLICATE_ASSET, f"{asset.name} is already on this roster"
            )
        if roster.is_locked_out(asset_id, completed_races):
            remaining = roster.lockout_races_remaining(asset_id, completed_races)
            return None, CommandResult.rejected(
                RejectionReason.LOCKED_OUT,
                f"{asset.name} is locked out for {remaining} more race(s)",
                lockout_races_remaining=remaining,
            )
        return asset, None

    def _not_held(self, roster: "Roster", asset_id: str, completed_races: int) -> CommandResult:
        """Rejection for releasing an asset the roster does not hold."""
        if roster.is_locked_out(asset_id, completed_races):
            remaining = roster.lockout_races_remaining(asset_id, completed_races)
            return CommandResult.rejected(
                RejectionReason.LOCKED_OUT,
                f"{asset_id} has expired and is locked out for {remaining} more race(s)",
                lockout_races_remaining=remaining,
            )
        return CommandResult.rejected(
            RejectionReason.NOT_FOUND, f"{asset_id} is not on this roster"
        )

    def _insufficient(self, cost: int, budget: int, what: str) -> CommandResult:
        shortfall = cost - budget
        return CommandResult.rejected(
            RejectionReason.INSUFFICIENT_BUDGET,
            f"Insufficient budget for {what}: need {cost}, have {budget} (short by {shortfall})",
            shortfall=shortfall,
        )

    def _new_contract(self, asset: "Asset", completed_races: int, is_reserve_pick: bool) -> Contract:
        return Contract(
            asset_id=asset.asset_id,
            kind=asset.kind,
            purchase_price=asset.price,
            current_price=asset.price,
            contract_length=self.config.contract_length,
            added_at_race=completed_races,
            is_reserve_pick=is_reserve_pick,
        )

    # =========================================================================
    # Commands
    # =========================================================================

    def buy(
        self,
        roster: "Roster",
        asset_id: str,
        completed_races: int,
        is_reserve_pick: bool = False,
        reason: str = "",
    ) -> CommandResult:
        """Acquire an asset at its current market price."""
        asset = self.assets.get(asset_id)
        if asset is not None:
            if asset.is_driver and roster.driver_count >= self.config.roster_size:
                return CommandResult.rejected(
                    RejectionReason.CAPACITY,
                    f"Roster already holds {self.config.roster_size} drivers",
                )
            if asset.is_constructor and roster.constructor is not None:
                if roster.constructor.asset_id != asset_id:
                    return CommandResult.rejected(
                        RejectionReason.CAPACITY, "Roster already holds a constructor"
                    )

        asset, rejection = self._check_acquirable(roster, asset_id, completed_races)
        if rejection is not None:
            return rejection

        if asset.price > roster.budget:
            return self._insufficient(asset.price, roster.budget, asset.name)

        roster.budget -= asset.price
        roster.add_contract(self._new_contract(asset, completed_races, is_reserve_pick))
        roster.reset_stale_counter()

        action = TradeAction.RESERVE_FILL if is_reserve_pick else TradeAction.BUY
        entry = self.trade_log.add(TradeLogEntry(
            round=completed_races,
            roster_id=roster.roster_id,
            action=action,
            asset_id=asset_id,
            price=asset.price,
            reason=reason or ("Reserve auto-fill" if is_reserve_pick else "Purchase"),
        ))
        logger.debug(f"{roster.name}: bought {asset_id} for {asset.price} (budget {roster.budget})")
        return CommandResult.success(
            f"Bought {asset.name} for {asset.price}",
            entry=entry,
            roster=roster.to_dict(),
        )

    def sell(
        self,
        roster: "Roster",
        asset_id: str,
        completed_races: int,
        reason: str = "",
    ) -> CommandResult:
        """Release a held asset, paying fees and awarding value capture."""
        contract = roster.get_contract(asset_id)
        if contract is None:
            return self._not_held(roster, asset_id, completed_races)

        quote = self.quote_sale(contract)
        contract.sync_price(quote.price)

        roster.budget += quote.proceeds
        self._award_value_capture(roster, quote.value_capture_bonus)
        roster.bank(contract)
        roster.remove_contract(asset_id)
        roster.reset_stale_counter()

        if not reason:
            reason = ("Early termination" if quote.early_termination else "Voluntary sale")
        entry = self.trade_log.add(TradeLogEntry(
            round=completed_races,
            roster_id=roster.roster_id,
            action=TradeAction.SELL,
            asset_id=asset_id,
            price=quote.price,
            fee=quote.fee,
            proceeds=quote.proceeds,
            bonus=quote.value_capture_bonus,
            reason=reason,
        ))
        logger.debug(f"{roster.name}: sold {asset_id} for {quote.proceeds} (fee {quote.fee})")
        return CommandResult.success(
            f"Sold {asset_id} for {quote.proceeds}",
            entry=entry,
            roster=roster.to_dict(),
            proceeds=quote.proceeds,
            fee=quote.fee,
            value_capture_bonus=quote.value_capture_bonus,
        )

    def swap(
        self,
        roster: "Roster",
        old_asset_id: str,
        new_asset_id: str,
        completed_races: int,
        reason: str = "",
    ) -> CommandResult:
        """Atomic sell-then-buy of two assets of the same kind."""
        old_contract = roster.get_contract(old_asset_id)
        if old_contract is None:
            return self._not_held(roster, old_asset_id, completed_races)

        new_asset = self.assets.get(new_asset_id)
        if new_asset is not None and new_asset.kind != old_contract.kind:
            return CommandResult.rejected(
                RejectionReason.KIND_MISMATCH,
                f"Cannot swap a {old_contract.kind.value} for a {new_asset.kind.value}",
            )

        new_asset, rejection = self._check_acquirable(roster, new_asset_id, completed_races)
        if rejection is not None:
            return rejection

        quote = self.quote_sale(old_contract)
        net_cost = new_asset.price - quote.proceeds
        if net_cost > roster.budget:
            return self._insufficient(net_cost, roster.budget, f"swap to {new_asset.name}")

        old_contract.sync_price(quote.price)
        roster.budget -= net_cost
        self._award_value_capture(roster, quote.value_capture_bonus)
        roster.bank(old_contract)
        roster.remove_contract(old_asset_id)
        roster.add_contract(self._new_contract(new_asset, completed_races, False))
        roster.reset_stale_counter()

        entry = self.trade_log.add(TradeLogEntry(
            round=completed_races,
            roster_id=roster.roster_id,
            action=TradeAction.SWAP,
            asset_id=new_asset_id,
            replaced_asset_id=old_asset_id,
            price=new_asset.price,
            fee=quote.fee,
            proceeds=quote.proceeds,
            bonus=quote.value_capture_bonus,
            reason=reason or f"Swap {old_asset_id} -> {new_asset_id}",
        ))
        logger.debug(f"{roster.name}: swapped {old_asset_id} for {new_asset_id} (net {net_cost})")
        return CommandResult.success(
            f"Swapped {old_asset_id} for {new_asset.name}",
            entry=entry,
            roster=roster.to_dict(),
            proceeds=quote.proceeds,
            fee=quote.fee,
            value_capture_bonus=quote.value_capture_bonus,
            extra={"net_cost": net_cost},
        )

    def release_expired(self, roster: "Roster", contract: Contract, completed_races: int) -> Optional[TradeLogEntry]:
        """
        Automatic sale on natural expiry: full market price, no fee.

        Returns None if the contract is no longer on the roster.
        """
        if roster.get_contract(contract.asset_id) is not contract:
            return None
        price = self._market_price(contract)
        contract.sync_price(price)
        roster.budget += price
        roster.bank(contract)
        roster.remove_contract(contract.asset_id)
        return self.trade_log.add(TradeLogEntry(
            round=completed_races,
            roster_id=roster.roster_id,
            action=TradeAction.SELL_EXPIRY,
            asset_id=contract.asset_id,
            price=price,
            proceeds=price,
            reason=f"Contract expired after {contract.races_held} races",
        ))

    def _award_value_capture(self, roster: "Roster", bonus: int) -> None:
        if bonus > 0:
            roster.bonus_points += bonus
            roster.total_points += bonus

    # =========================================================================
    # Ace
    # =========================================================================

    def set_ace(self, roster: "Roster", asset_id: str) -> CommandResult:
        """Designate a held asset as ace. Replaces any previous designation."""
        contract = roster.get_contract(asset_id)
        if contract is None:
            return CommandResult.rejected(
                RejectionReason.NOT_FOUND, f"{asset_id} is not on this roster"
            )
        if contract.kind == AssetKind.CONSTRUCTOR and not self.config.ace_allows_constructor:
            return CommandResult.rejected(
                RejectionReason.ACE_INELIGIBLE, "Constructors cannot be ace under these rules"
            )
        price = self._market_price(contract)
        if price > self.config.ace_price_ceiling:
            return CommandResult.rejected(
                RejectionReason.ACE_INELIGIBLE,
                f"{asset_id} costs {price}, above the ace ceiling of {self.config.ace_price_ceiling}",
            )
        roster.ace = AceDesignation(asset_id=asset_id, kind=contract.kind)
        roster.touch()
        return CommandResult.success(f"{asset_id} is now ace", roster=roster.to_dict())

    def clear_ace(self, roster: "Roster") -> CommandResult:
        roster.ace = None
        roster.touch()
        return CommandResult.success("Ace cleared", roster=roster.to_dict())
