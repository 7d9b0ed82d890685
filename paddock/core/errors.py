"""
Command outcomes and engine exceptions.

Expected business conditions (full roster, locked-out asset, not enough
budget...) come back as a rejected CommandResult. Exceptions are reserved
for programmer errors: bad configuration, resubmitted races, duplicate
asset registration.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from paddock.core.transactions.trade_log import TradeLogEntry


class RejectionReason(Enum):
    """Why a roster command was refused."""
    CAPACITY = "capacity"
    DUPLICATE_ASSET = "duplicate_asset"
    LOCKED_OUT = "locked_out"
    INSUFFICIENT_BUDGET = "insufficient_budget"
    NOT_FOUND = "not_found"
    ACE_INELIGIBLE = "ace_ineligible"
    KIND_MISMATCH = "kind_mismatch"


@dataclass
class CommandResult:
    """
    Outcome of a roster command.

    On success, `roster` holds a snapshot of the updated roster for the
    persistence collaborator. On rejection nothing was mutated.
    """
    ok: bool
    reason: Optional[RejectionReason] = None
    message: str = ""
    entry: Optional["TradeLogEntry"] = None
    roster: Optional[dict] = None

    # Rejection details
    lockout_races_remaining: Optional[int] = None
    shortfall: Optional[int] = None

    # Sale details
    proceeds: int = 0
    fee: int = 0
    value_capture_bonus: int = 0

    extra: dict = field(default_factory=dict)

    @classmethod
    def success(cls, message: str = "", **kwargs) -> "CommandResult":
        return cls(ok=True, message=message, **kwargs)

    @classmethod
    def rejected(cls, reason: RejectionReason, message: str, **kwargs) -> "CommandResult":
        return cls(ok=False, reason=reason, message=message, **kwargs)

    def __bool__(self) -> bool:
        return self.ok

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "entry": self.entry.to_dict() if self.entry else None,
            "roster": self.roster,
            "lockout_races_remaining": self.lockout_races_remaining,
            "shortfall": self.shortfall,
            "proceeds": self.proceeds,
            "fee": self.fee,
            "value_capture_bonus": self.value_capture_bonus,
        }


class EconomyError(Exception):
    """Base class for roster economy programmer errors."""


class ConfigurationError(EconomyError):
    """Economy configuration is malformed."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid economy configuration: " + "; ".join(errors))


class DuplicateAssetError(EconomyError):
    """An asset id was registered twice."""


class UnknownAssetError(EconomyError):
    """Season setup referenced an asset that was never registered."""


class RaceProcessingError(EconomyError):
    """A race result cannot be processed."""


class RaceAlreadyProcessedError(RaceProcessingError):
    """The race was already applied; applying it again would double-count."""


class RaceNotCompleteError(RaceProcessingError):
    """The result has not been marked complete by the provider."""


class RaceOutOfOrderError(RaceProcessingError):
    """Races must be processed in round order."""
