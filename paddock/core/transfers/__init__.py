"""Buy, sell and swap against a roster."""

from paddock.core.transfers.engine import TransferEngine, SaleQuote, floor_int

__all__ = [
    "TransferEngine",
    "SaleQuote",
    "floor_int",
]
