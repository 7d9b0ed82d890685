"""
Trade Logging System.

Append-only audit trail of every buy, sell, swap, expiry and reserve
fill. Tests and the notification collaborator read roster bookkeeping
from here.
"""

from dataclasses import dataclass, field
from typing import Optional
import uuid

from paddock.core.enums import TradeAction


@dataclass
class TradeLogEntry:
    """
    A single roster transaction.

    `round` is the number of races completed when the trade happened, so
    trades made before the first race carry round 0.
    """
    round: int
    roster_id: str
    action: TradeAction
    asset_id: str
    price: int = 0
    fee: int = 0
    reason: str = ""

    # Sale/swap details
    proceeds: int = 0
    bonus: int = 0                                  # Value-capture points awarded
    replaced_asset_id: Optional[str] = None         # Swaps: asset given up

    entry_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def get_headline(self) -> str:
        """Short human-readable description of the trade."""
        a = self.action
        if a == TradeAction.BUY:
            return f"Bought {self.asset_id} for {self.price}"
        elif a == TradeAction.SELL:
            fee = f" (fee {self.fee})" if self.fee else ""
            return f"Sold {self.asset_id} for {self.proceeds}{fee}"
        elif a == TradeAction.SWAP:
            return f"Swapped {self.replaced_asset_id} for {self.asset_id} at {self.price}"
        elif a == TradeAction.SELL_EXPIRY:
            return f"Contract expired: {self.asset_id} sold for {self.proceeds}"
        elif a == TradeAction.RESERVE_FILL:
            return f"Reserve pick: {self.asset_id} for {self.price}"
        return f"{a.name}: {self.asset_id}"

    def to_dict(self) -> dict:
        return {
            "entry_id": self.entry_id,
            "round": self.round,
            "roster_id": self.roster_id,
            "action": self.action.name,
            "asset_id": self.asset_id,
            "price": self.price,
            "fee": self.fee,
            "reason": self.reason,
            "proceeds": self.proceeds,
            "bonus": self.bonus,
            "replaced_asset_id": self.replaced_asset_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TradeLogEntry":
        return cls(
            entry_id=data.get("entry_id", str(uuid.uuid4())),
            round=data["round"],
            roster_id=data["roster_id"],
            action=TradeAction[data["action"]],
            asset_id=data["asset_id"],
            price=data.get("price", 0),
            fee=data.get("fee", 0),
            reason=data.get("reason", ""),
            proceeds=data.get("proceeds", 0),
            bonus=data.get("bonus", 0),
            replaced_asset_id=data.get("replaced_asset_id"),
        )


@dataclass
class TradeLog:
    """
    Complete trade history for the engine.

    Entries are kept in insertion order; nothing is ever removed.
    """
    entries: list[TradeLogEntry] = field(default_factory=list)

    def add(self, entry: TradeLogEntry) -> TradeLogEntry:
        """Append an entry to the log."""
        self.entries.append(entry)
        return entry

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def get_by_roster(self, roster_id: str, round: int = None) -> list[TradeLogEntry]:
        """Get all entries for a roster."""
        results = [e for e in self.entries if e.roster_id == roster_id]
        if round is not None:
            results = [e for e in results if e.round == round]
        return results

    def get_by_asset(self, asset_id: str) -> list[TradeLogEntry]:
        """Get all entries touching an asset, including swaps away from it."""
        return [e for e in self.entries
                if e.asset_id == asset_id or e.replaced_asset_id == asset_id]

    def get_by_action(self, action: TradeAction, roster_id: str = None) -> list[TradeLogEntry]:
        """Get all entries of a specific action."""
        results = [e for e in self.entries if e.action == action]
        if roster_id is not None:
            results = [e for e in results if e.roster_id == roster_id]
        return results

    def get_by_round(self, round: int) -> list[TradeLogEntry]:
        return [e for e in self.entries if e.round == round]

    def get_recent(self, count: int = 10) -> list[TradeLogEntry]:
        """Get most recent entries."""
        return self.entries[-count:] if count > 0 else []

    def get_expiries(self, roster_id: str = None) -> list[TradeLogEntry]:
        return self.get_by_action(TradeAction.SELL_EXPIRY, roster_id)

    def get_reserve_fills(self, roster_id: str = None) -> list[TradeLogEntry]:
        return self.get_by_action(TradeAction.RESERVE_FILL, roster_id)

    def total_fees(self, roster_id: str) -> int:
        """Total early-termination fees paid by a roster."""
        return sum(e.fee for e in self.get_by_roster(roster_id))

    def to_dict(self) -> dict:
        return {"entries": [e.to_dict() for e in self.entries]}

    @classmethod
    def from_dict(cls, data: dict) -> "TradeLog":
        return cls(entries=[TradeLogEntry.from_dict(e) for e in data.get("entries", [])])
