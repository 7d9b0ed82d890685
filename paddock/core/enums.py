"""Enumerations shared across the roster economy."""

from enum import Enum, auto


class AssetKind(Enum):
    """What kind of asset a roster can hold."""
    DRIVER = "driver"
    CONSTRUCTOR = "constructor"


class FinishStatus(Enum):
    """How an asset's race ended."""
    FINISHED = "finished"
    DNF = "dnf"
    DSQ = "dsq"


class TradeAction(Enum):
    """Kind of trade-log entry."""
    BUY = auto()
    SELL = auto()
    SWAP = auto()
    SELL_EXPIRY = auto()      # Natural contract expiry, automatic sale
    RESERVE_FILL = auto()     # Auto-fill purchase after expiry


class SlotStatus(Enum):
    """State of one driver slot on a roster."""
    HELD = auto()
    EMPTY = auto()
    PENDING_LOCKOUT = auto()  # Emptied by expiry, lockout still running


class PriceTier(Enum):
    """Price band of an asset."""
    A = "A"
    B = "B"
    C = "C"
