"""
Market assets: drivers and constructors.

Assets are created at season setup and never deleted during a season.
The pricing model is the only writer of their price fields and rolling
history.
"""

from dataclasses import dataclass, field
from typing import Optional

from paddock.core.enums import AssetKind


@dataclass
class Asset:
    """
    A driver or constructor that rosters can hold.

    `recent_points` and `recent_sprint_flags` are parallel, most recent
    race first, capped at the pricing window.
    """
    asset_id: str
    name: str
    kind: AssetKind
    price: int
    previous_price: Optional[int] = None

    recent_points: list[int] = field(default_factory=list)
    recent_sprint_flags: list[bool] = field(default_factory=list)
    season_points: int = 0

    # Constructors only: the two drivers whose results make up its points
    driver_ids: tuple[str, ...] = ()

    # Drivers only
    constructor_id: Optional[str] = None

    is_active: bool = True

    def __post_init__(self):
        if self.previous_price is None:
            self.previous_price = self.price
        if self.kind == AssetKind.CONSTRUCTOR and len(self.driver_ids) != 2:
            raise ValueError(f"Constructor {self.asset_id} must reference exactly two drivers")
        self.driver_ids = tuple(self.driver_ids)

    @property
    def is_driver(self) -> bool:
        return self.kind == AssetKind.DRIVER

    @property
    def is_constructor(self) -> bool:
        return self.kind == AssetKind.CONSTRUCTOR

    @property
    def price_change(self) -> int:
        return self.price - self.previous_price

    def to_dict(self) -> dict:
        return {
            "asset_id": self.asset_id,
            "name": self.name,
            "kind": self.kind.value,
            "price": self.price,
            "previous_price": self.previous_price,
            "recent_points": list(self.recent_points),
            "recent_sprint_flags": list(self.recent_sprint_flags),
            "season_points": self.season_points,
            "driver_ids": list(self.driver_ids),
            "constructor_id": self.constructor_id,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Asset":
        return cls(
            asset_id=data["asset_id"],
            name=data.get("name", data["asset_id"]),
            kind=AssetKind(data["kind"]),
            price=data["price"],
            previous_price=data.get("previous_price"),
            recent_points=list(data.get("recent_points", [])),
            recent_sprint_flags=list(data.get("recent_sprint_flags", [])),
            season_points=data.get("season_points", 0),
            driver_ids=tuple(data.get("driver_ids", ())),
            constructor_id=data.get("constructor_id"),
            is_active=data.get("is_active", True),
        )


def create_driver(
    asset_id: str,
    name: str,
    price: int,
    constructor_id: Optional[str] = None,
) -> Asset:
    """Create a driver asset."""
    return Asset(
        asset_id=asset_id,
        name=name,
        kind=AssetKind.DRIVER,
        price=price,
        constructor_id=constructor_id,
    )


def create_constructor(
    asset_id: str,
    name: str,
    price: int,
    driver_ids: tuple[str, str],
) -> Asset:
    """Create a constructor asset backed by two drivers."""
    return Asset(
        asset_id=asset_id,
        name=name,
        kind=AssetKind.CONSTRUCTOR,
        price=price,
        driver_ids=tuple(driver_ids),
    )
