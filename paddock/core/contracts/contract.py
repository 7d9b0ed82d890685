"""
Roster contracts.

A Contract binds one roster to one held asset for a fixed number of
races. It is created on purchase, credited and advanced once per race,
and destroyed on sale, swap or expiry. Points it scored are banked on
the roster when it goes away.
"""

from dataclasses import dataclass, field
import uuid

from paddock.core.enums import AssetKind


@dataclass
class Contract:
    """
    One roster holding one asset.

    `contract_length` of 0 means the contract never expires (rule
    versions without contracts).
    """
    asset_id: str
    kind: AssetKind
    purchase_price: int
    current_price: int
    contract_length: int
    added_at_race: int                 # Completed races when acquired

    points_scored: int = 0
    races_held: int = 0
    is_reserve_pick: bool = False

    contract_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def races_remaining(self) -> int:
        if self.contract_length <= 0:
            return 0
        return max(0, self.contract_length - self.races_held)

    @property
    def is_expired(self) -> bool:
        return self.contract_length > 0 and self.races_held >= self.contract_length

    @property
    def profit(self) -> int:
        """Market appreciation since purchase (negative if it lost value)."""
        return self.current_price - self.purchase_price

    def credit(self, points: int) -> None:
        """Add points scored in a race while held."""
        self.points_scored += points

    def advance(self) -> None:
        """Count one more race held. Never decreases."""
        self.races_held += 1

    def sync_price(self, price: int) -> None:
        self.current_price = price

    def to_dict(self) -> dict:
        return {
            "contract_id": self.contract_id,
            "asset_id": self.asset_id,
            "kind": self.kind.value,
            "purchase_price": self.purchase_price,
            "current_price": self.current_price,
            "contract_length": self.contract_length,
            "added_at_race": self.added_at_race,
            "points_scored": self.points_scored,
            "races_held": self.races_held,
            "races_remaining": self.races_remaining,
            "is_reserve_pick": self.is_reserve_pick,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Contract":
        return cls(
            contract_id=data.get("contract_id", str(uuid.uuid4())),
            asset_id=data["asset_id"],
            kind=AssetKind(data["kind"]),
            purchase_price=data["purchase_price"],
            current_price=data.get("current_price", data["purchase_price"]),
            contract_length=data.get("contract_length", 0),
            added_at_race=data.get("added_at_race", 0),
            points_scored=data.get("points_scored", 0),
            races_held=data.get("races_held", 0),
            is_reserve_pick=data.get("is_reserve_pick", False),
        )

    def __repr__(self) -> str:
        length = self.contract_length or "open"
        return (f"Contract({self.asset_id}, bought {self.purchase_price}, "
                f"held {self.races_held}/{length})")
