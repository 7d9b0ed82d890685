"""Contracts and the per-race contract ledger sweep."""

from paddock.core.contracts.contract import Contract
from paddock.core.contracts.ledger import ContractLedger, SweepOutcome

__all__ = [
    "Contract",
    "ContractLedger",
    "SweepOutcome",
]
