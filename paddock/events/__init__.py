"""Event system for the roster economy."""

from paddock.events.bus import EventBus
from paddock.events.types import (
    ContractExpiredEvent,
    EconomyEvent,
    PriceChangedEvent,
    RaceProcessedEvent,
    ReserveFilledEvent,
    TradeExecutedEvent,
)

__all__ = [
    "ContractExpiredEvent",
    "EconomyEvent",
    "EventBus",
    "PriceChangedEvent",
    "RaceProcessedEvent",
    "ReserveFilledEvent",
    "TradeExecutedEvent",
]
