"""Event types emitted by the roster economy."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from paddock.core.pricing.model import PriceChange
    from paddock.core.transactions.trade_log import TradeLogEntry


@dataclass
class EconomyEvent:
    """Base class for all economy events."""

    timestamp: datetime = field(default_factory=datetime.now)
    round: int = 0  # Completed races when the event fired


@dataclass
class TradeExecutedEvent(EconomyEvent):
    """Fired for every trade-log entry written."""

    entry: "TradeLogEntry" = None
    roster_id: str = ""


@dataclass
class ContractExpiredEvent(EconomyEvent):
    """Fired when a contract reaches its length and is sold automatically."""

    roster_id: str = ""
    asset_id: str = ""
    proceeds: int = 0
    banked_points: int = 0
    lockout_expires_at: Optional[int] = None


@dataclass
class ReserveFilledEvent(EconomyEvent):
    """Fired when auto-fill bought reserve drivers for a roster."""

    roster_id: str = ""
    asset_ids: list[str] = field(default_factory=list)
    slots_still_empty: int = 0


@dataclass
class PriceChangedEvent(EconomyEvent):
    """Fired when an asset's market price moved after a race."""

    change: "PriceChange" = None


@dataclass
class RaceProcessedEvent(EconomyEvent):
    """Fired once a race has been fully applied to every roster."""

    race_name: str = ""
    roster_points: dict[str, int] = field(default_factory=dict)
    winners: dict[str, Optional[str]] = field(default_factory=dict)  # league_id -> roster_id
