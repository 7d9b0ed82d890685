"""
Roster model.

A roster is a participant's squad: up to five driver contracts, at most
one constructor contract, a budget, and the counters the scoring rules
read. Only the EconomyEngine and the components it owns mutate rosters.
"""

from dataclasses import dataclass, field
from typing import Optional, Iterator
import uuid

from paddock.core.contracts.contract import Contract
from paddock.core.enums import AssetKind, SlotStatus


@dataclass(frozen=True)
class AceDesignation:
    """The held asset whose points get the ace multiplier."""
    asset_id: str
    kind: AssetKind

    def to_dict(self) -> dict:
        return {"asset_id": self.asset_id, "kind": self.kind.value}

    @classmethod
    def from_dict(cls, data: dict) -> "AceDesignation":
        return cls(asset_id=data["asset_id"], kind=AssetKind(data["kind"]))


@dataclass(frozen=True)
class RosterSlot:
    """
    View of one driver slot.

    HELD carries the contract, PENDING_LOCKOUT the asset that left and the
    race count at which it may be bought again.
    """
    status: SlotStatus
    contract: Optional[Contract] = None
    asset_id: Optional[str] = None
    lockout_expires_at: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "status": self.status.name,
            "asset_id": self.asset_id,
            "lockout_expires_at": self.lockout_expires_at,
        }


@dataclass
class Roster:
    """
    A participant's squad in the roster economy.

    Invariants: budget >= 0, at most `roster_size` drivers with no
    duplicates, ace points at a held asset.
    """
    owner_id: str
    name: str
    budget: int
    league_id: Optional[str] = None
    roster_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    drivers: list[Contract] = field(default_factory=list)
    constructor: Optional[Contract] = None
    ace: Optional[AceDesignation] = None

    # Scoring counters
    total_points: int = 0
    locked_points: int = 0            # Banked from departed contracts
    bonus_points: int = 0             # Value-capture bonuses
    catch_up_points: int = 0          # Late-joiner catch-up
    penalty_points: int = 0           # Accrued stale-roster penalties
    races_since_transfer: int = 0
    race_history: dict[int, int] = field(default_factory=dict)

    # Lockouts: asset_id -> completed-race count at which the lockout ends
    driver_lockouts: dict[str, int] = field(default_factory=dict)
    constructor_lockouts: dict[str, int] = field(default_factory=dict)

    joined_at_race: int = 0
    has_held_driver: bool = False
    revision: int = 0

    # =========================================================================
    # Contracts
    # =========================================================================

    @property
    def contracts(self) -> list[Contract]:
        """All held contracts, drivers first."""
        held = list(self.drivers)
        if self.constructor is not None:
            held.append(self.constructor)
        return held

    @property
    def driver_count(self) -> int:
        return len(self.drivers)

    @property
    def driver_ids(self) -> list[str]:
        return [c.asset_id for c in self.drivers]

    def iter_contracts(self) -> Iterator[Contract]:
        yield from self.drivers
        if self.constructor is not None:
            yield self.constructor

    def get_contract(self, asset_id: str) -> Optional[Contract]:
        for contract in self.iter_contracts():
            if contract.asset_id == asset_id:
                return contract
        return None

    def holds(self, asset_id: str) -> bool:
        return self.get_contract(asset_id) is not None

    def add_contract(self, contract: Contract) -> None:
        if contract.kind == AssetKind.CONSTRUCTOR:
            self.constructor = contract
        else:
            self.drivers.append(contract)
            self.has_held_driver = True
        self.touch()

    def remove_contract(self, asset_id: str) -> Optional[Contract]:
        """Remove and return a contract. Absent contracts return None."""
        if self.constructor is not None and self.constructor.asset_id == asset_id:
            contract, self.constructor = self.constructor, None
        else:
            contract = next((c for c in self.drivers if c.asset_id == asset_id), None)
            if contract is None:
                return None
            self.drivers.remove(contract)
        if self.ace is not None and self.ace.asset_id == asset_id:
            self.ace = None
        self.touch()
        return contract

    def bank(self, contract: Contract) -> None:
        """Bank a departing contract's points into locked points."""
        self.locked_points += contract.points_scored
        self.touch()

    def reset_stale_counter(self) -> None:
        self.races_since_transfer = 0

    def touch(self) -> None:
        self.revision += 1

    # =========================================================================
    # Lockouts
    # =========================================================================

    def _lockouts_for(self, kind: AssetKind) -> dict[str, int]:
        return self.constructor_lockouts if kind == AssetKind.CONSTRUCTOR else self.driver_lockouts

    def add_lockout(self, asset_id: str, kind: AssetKind, expires_at: int) -> None:
        self._lockouts_for(kind)[asset_id] = expires_at
        self.touch()

    def lockout_expiry(self, asset_id: str) -> Optional[int]:
        if asset_id in self.driver_lockouts:
            return self.driver_lockouts[asset_id]
        return self.constructor_lockouts.get(asset_id)

    def is_locked_out(self, asset_id: str, completed_races: int) -> bool:
        expiry = self.lockout_expiry(asset_id)
        return expiry is not None and completed_races < expiry

    def lockout_races_remaining(self, asset_id: str, completed_races: int) -> int:
        expiry = self.lockout_expiry(asset_id)
        if expiry is None:
            return 0
        return max(0, expiry - completed_races)

    def prune_lockouts(self, completed_races: int) -> list[str]:
        """Drop lockouts that have run out. Returns the released asset ids."""
        released = []
        for lockouts in (self.driver_lockouts, self.constructor_lockouts):
            for asset_id, expiry in list(lockouts.items()):
                if completed_races >= expiry:
                    del lockouts[asset_id]
                    released.append(asset_id)
        if released:
            self.touch()
        return released

    def pending_driver_lockouts(self, completed_races: int) -> dict[str, int]:
        return {a: e for a, e in self.driver_lockouts.items() if completed_races < e}

    # =========================================================================
    # Slots
    # =========================================================================

    def slots(self, completed_races: int, roster_size: int = 5) -> list[RosterSlot]:
        """Driver slots: held contracts, then pending lockouts, then empties."""
        slots = [RosterSlot(SlotStatus.HELD, contract=c, asset_id=c.asset_id) for c in self.drivers]
        pending = sorted(self.pending_driver_lockouts(completed_races).items(), key=lambda kv: kv[1])
        for asset_id, expiry in pending:
            if len(slots) >= roster_size:
                break
            slots.append(RosterSlot(
                SlotStatus.PENDING_LOCKOUT,
                asset_id=asset_id,
                lockout_expires_at=expiry,
            ))
        while len(slots) < roster_size:
            slots.append(RosterSlot(SlotStatus.EMPTY))
        return slots

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict:
        return {
            "roster_id": self.roster_id,
            "owner_id": self.owner_id,
            "name": self.name,
            "league_id": self.league_id,
            "budget": self.budget,
            "drivers": [c.to_dict() for c in self.drivers],
            "constructor": self.constructor.to_dict() if self.constructor else None,
            "ace": self.ace.to_dict() if self.ace else None,
            "total_points": self.total_points,
            "locked_points": self.locked_points,
            "bonus_points": self.bonus_points,
            "catch_up_points": self.catch_up_points,
            "penalty_points": self.penalty_points,
            "races_since_transfer": self.races_since_transfer,
            "race_history": {str(k): v for k, v in self.race_history.items()},
            "driver_lockouts": dict(self.driver_lockouts),
            "constructor_lockouts": dict(self.constructor_lockouts),
            "joined_at_race": self.joined_at_race,
            "has_held_driver": self.has_held_driver,
            "revision": self.revision,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Roster":
        constructor = data.get("constructor")
        ace = data.get("ace")
        return cls(
            roster_id=data.get("roster_id", str(uuid.uuid4())),
            owner_id=data["owner_id"],
            name=data.get("name", ""),
            league_id=data.get("league_id"),
            budget=data.get("budget", 0),
            drivers=[Contract.from_dict(c) for c in data.get("drivers", [])],
            constructor=Contract.from_dict(constructor) if constructor else None,
            ace=AceDesignation.from_dict(ace) if ace else None,
            total_points=data.get("total_points", 0),
            locked_points=data.get("locked_points", 0),
            bonus_points=data.get("bonus_points", 0),
            catch_up_points=data.get("catch_up_points", 0),
            penalty_points=data.get("penalty_points", 0),
            races_since_transfer=data.get("races_since_transfer", 0),
            race_history={int(k): v for k, v in data.get("race_history", {}).items()},
            driver_lockouts=dict(data.get("driver_lockouts", {})),
            constructor_lockouts=dict(data.get("constructor_lockouts", {})),
            joined_at_race=data.get("joined_at_race", 0),
            has_held_driver=data.get("has_held_driver", False),
            revision=data.get("revision", 0),
        )

    def __repr__(self) -> str:
        return (f"Roster({self.name!r}, {self.driver_count} drivers, "
                f"budget {self.budget}, {self.total_points} pts)")
