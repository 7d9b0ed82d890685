"""Trade logging and roster move tracking."""

from paddock.core.transactions.trade_log import (
    TradeLog,
    TradeLogEntry,
)

__all__ = [
    "TradeLog",
    "TradeLogEntry",
]
