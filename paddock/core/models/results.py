"""
Race results as handed over by the results provider.

A RaceResult is immutable once marked complete; the engine only reads it.
Raw points per entry come from the provider. `ResultEntry.from_finish`
derives them from the points tables when only positions are known.
"""

from dataclasses import dataclass, field
from typing import Optional

from paddock.core.enums import FinishStatus


RACE_POINTS = {1: 25, 2: 18, 3: 15, 4: 12, 5: 10, 6: 8, 7: 6, 8: 4, 9: 2, 10: 1}
SPRINT_POINTS = {1: 8, 2: 7, 3: 6, 4: 5, 5: 4, 6: 3, 7: 2, 8: 1}

# Fastest lap only pays when the driver is classified inside this position
FASTEST_LAP_CUTOFF = 10
PODIUM_POSITIONS = (1, 2, 3)

# Per grid place gained (or lost) in the main race
POSITION_GAINED_BONUS = 1
DSQ_PENALTY = -5


def race_points_for(position: int) -> int:
    return RACE_POINTS.get(position, 0)


def sprint_points_for(position: int) -> int:
    return SPRINT_POINTS.get(position, 0)


@dataclass(frozen=True)
class ResultEntry:
    """One driver's result in a race or sprint."""
    driver_id: str
    position: Optional[int]       # None when not classified
    raw_points: int = 0
    fastest_lap: bool = False
    status: FinishStatus = FinishStatus.FINISHED
    grid_position: Optional[int] = None

    @property
    def classified(self) -> bool:
        return self.status == FinishStatus.FINISHED and self.position is not None

    @property
    def is_podium(self) -> bool:
        return self.classified and self.position in PODIUM_POSITIONS

    @property
    def positions_gained(self) -> int:
        """Grid places gained; negative when places were lost."""
        if not self.classified or self.grid_position is None:
            return 0
        return self.grid_position - self.position

    def points(self, fastest_lap_bonus: int = 1) -> int:
        """Raw points plus the fastest-lap bonus where it applies."""
        total = self.raw_points
        if self.fastest_lap and self.classified and self.position <= FASTEST_LAP_CUTOFF:
            total += fastest_lap_bonus
        return total

    @classmethod
    def from_finish(
        cls,
        driver_id: str,
        position: Optional[int],
        sprint: bool = False,
        fastest_lap: bool = False,
        status: FinishStatus = FinishStatus.FINISHED,
        grid_position: Optional[int] = None,
        position_gained_bonus: int = POSITION_GAINED_BONUS,
        dsq_penalty: int = DSQ_PENALTY,
    ) -> "ResultEntry":
        """
        Build an entry, scoring the position from the points tables.

        Main-race entries also score `position_gained_bonus` per grid place
        gained and lose it per place lost. A DNF scores 0, a DSQ scores
        `dsq_penalty`.
        """
        if status == FinishStatus.DSQ:
            return cls(driver_id=driver_id, position=None, raw_points=dsq_penalty,
                       status=status, grid_position=grid_position)
        if position is None or status != FinishStatus.FINISHED:
            return cls(driver_id=driver_id, position=None, raw_points=0,
                       status=FinishStatus.DNF, grid_position=grid_position)

        if sprint:
            return cls(driver_id=driver_id, position=position,
                       raw_points=sprint_points_for(position), status=status)

        points = race_points_for(position)
        if grid_position is not None:
            points += (grid_position - position) * position_gained_bonus
        return cls(
            driver_id=driver_id,
            position=position,
            raw_points=points,
            fastest_lap=fastest_lap,
            status=status,
            grid_position=grid_position,
        )

    def to_dict(self) -> dict:
        return {
            "driver_id": self.driver_id,
            "position": self.position,
            "grid_position": self.grid_position,
            "raw_points": self.raw_points,
            "fastest_lap": self.fastest_lap,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ResultEntry":
        return cls(
            driver_id=data["driver_id"],
            position=data.get("position"),
            raw_points=data.get("raw_points", 0),
            fastest_lap=data.get("fastest_lap", False),
            status=FinishStatus(data.get("status", "finished")),
            grid_position=data.get("grid_position"),
        )


@dataclass(frozen=True)
class RaceResult:
    """
    Finished result for one race weekend.

    `sprint_entries` is empty unless the weekend had a sprint.
    """
    round: int
    name: str = ""
    entries: dict[str, ResultEntry] = field(default_factory=dict)
    sprint_entries: dict[str, ResultEntry] = field(default_factory=dict)
    is_complete: bool = False

    @property
    def has_sprint(self) -> bool:
        return bool(self.sprint_entries)

    @property
    def driver_ids(self) -> set[str]:
        return set(self.entries) | set(self.sprint_entries)

    def entry(self, driver_id: str) -> Optional[ResultEntry]:
        return self.entries.get(driver_id)

    def finish_position(self, driver_id: str) -> Optional[int]:
        entry = self.entries.get(driver_id)
        return entry.position if entry and entry.classified else None

    def is_podium(self, driver_id: str) -> bool:
        entry = self.entries.get(driver_id)
        return entry is not None and entry.is_podium

    def driver_points(self, driver_id: str, fastest_lap_bonus: int = 1) -> int:
        """Race plus sprint points for a driver (0 if absent)."""
        total = 0
        entry = self.entries.get(driver_id)
        if entry:
            total += entry.points(fastest_lap_bonus)
        sprint = self.sprint_entries.get(driver_id)
        if sprint:
            total += sprint.points(fastest_lap_bonus)
        return total

    def combined_points(self, driver_ids, fastest_lap_bonus: int = 1) -> int:
        """Sum of driver points, used for constructors."""
        return sum(self.driver_points(d, fastest_lap_bonus) for d in driver_ids)

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "name": self.name,
            "entries": [e.to_dict() for e in self.entries.values()],
            "sprint_entries": [e.to_dict() for e in self.sprint_entries.values()],
            "is_complete": self.is_complete,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RaceResult":
        entries = [ResultEntry.from_dict(e) for e in data.get("entries", [])]
        sprint = [ResultEntry.from_dict(e) for e in data.get("sprint_entries", [])]
        return cls(
            round=data["round"],
            name=data.get("name", ""),
            entries={e.driver_id: e for e in entries},
            sprint_entries={e.driver_id: e for e in sprint},
            is_complete=data.get("is_complete", False),
        )


def build_race_result(
    round: int,
    finishing_order: list[str],
    dnfs: tuple[str, ...] = (),
    fastest_lap: Optional[str] = None,
    sprint_order: Optional[list[str]] = None,
    name: str = "",
    is_complete: bool = True,
) -> RaceResult:
    """
    Build a result from finishing orders, scoring positions from the tables.

    `finishing_order` lists classified drivers P1 first; `dnfs` are
    unclassified.
    """
    entries = {}
    for pos, driver_id in enumerate(finishing_order, start=1):
        entries[driver_id] = ResultEntry.from_finish(
            driver_id, pos, fastest_lap=(driver_id == fastest_lap)
        )
    for driver_id in dnfs:
        entries[driver_id] = ResultEntry.from_finish(driver_id, None, status=FinishStatus.DNF)

    sprint_entries = {}
    if sprint_order:
        for pos, driver_id in enumerate(sprint_order, start=1):
            sprint_entries[driver_id] = ResultEntry.from_finish(driver_id, pos, sprint=True)

    return RaceResult(
        round=round,
        name=name,
        entries=entries,
        sprint_entries=sprint_entries,
        is_complete=is_complete,
    )
