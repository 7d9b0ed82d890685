"""
Seeded race simulator.

Each driver's performance is base strength plus noise scaled by how
inconsistent they are; finishers are ordered by performance. Sprints
run with less variance and fewer retirements. The same seed always
produces the same season.
"""

import random
from typing import Optional

from paddock.core.models.results import RaceResult, build_race_result
from paddock.data.grid import DRIVERS, DRIVERS_BY_ID, DriverSpec, SPRINT_ROUNDS, race_name


RACE_DNF_CHANCE = 0.08
SPRINT_DNF_CHANCE = 0.03
SPRINT_VARIANCE = 0.7
FASTEST_LAP_POOL = 10

# Drivers missing from the strength table run like a rookie
DEFAULT_SPEC = DriverSpec("unknown", "Unknown", "", 0.0, 52, 0.50)


class RaceSimulator:
    """Produces complete race results for a grid of drivers."""

    def __init__(
        self,
        seed: Optional[int] = None,
        driver_ids: Optional[list[str]] = None,
        sprint_rounds: frozenset[int] = SPRINT_ROUNDS,
    ):
        self.rng = random.Random(seed)
        self.driver_ids = driver_ids or [d.asset_id for d in DRIVERS]
        self.sprint_rounds = sprint_rounds

    def _performance(self, spec: DriverSpec, sprint: bool) -> float:
        variance = SPRINT_VARIANCE if sprint else 1.0
        return (spec.strength
                + self.rng.gauss(0, 15 * variance) * (1 - spec.consistency)
                + self.rng.gauss(0, 5 * variance))

    def run_session(self, sprint: bool = False) -> tuple[list[str], list[str]]:
        """Simulate one session. Returns (finishing order, retirements)."""
        dnf_chance = SPRINT_DNF_CHANCE if sprint else RACE_DNF_CHANCE
        finishers = []
        dnfs = []
        for driver_id in self.driver_ids:
            spec = DRIVERS_BY_ID.get(driver_id, DEFAULT_SPEC)
            perf = self._performance(spec, sprint)
            if self.rng.random() < dnf_chance:
                dnfs.append(driver_id)
            else:
                finishers.append((perf, driver_id))
        finishers.sort(key=lambda pair: pair[0], reverse=True)
        return [driver_id for _, driver_id in finishers], dnfs

    def simulate(self, round: int) -> RaceResult:
        """Simulate a full weekend, including the sprint on sprint rounds."""
        order, dnfs = self.run_session()
        fastest_lap = None
        pool = order[:FASTEST_LAP_POOL]
        if pool:
            fastest_lap = self.rng.choice(pool)

        sprint_order = None
        if round in self.sprint_rounds:
            sprint_order, _ = self.run_session(sprint=True)

        return build_race_result(
            round=round,
            finishing_order=order,
            dnfs=tuple(dnfs),
            fastest_lap=fastest_lap,
            sprint_order=sprint_order,
            name=race_name(round),
        )
