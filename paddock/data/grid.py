"""
Default season grid.

Drivers, constructors and the race calendar used by the simulator and
the API when no other grid is supplied. Previous-season averages are
points per race; opening prices derive from them through the pricing
model. Strength and consistency feed the race simulator only.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from paddock.core.economy import EconomyEngine


@dataclass(frozen=True)
class DriverSpec:
    asset_id: str
    name: str
    constructor_id: str
    previous_average: float
    strength: int             # Base performance, 0-100
    consistency: float        # 0-1, higher means less race-to-race variance


@dataclass(frozen=True)
class ConstructorSpec:
    asset_id: str
    name: str
    driver_ids: tuple[str, str]


DRIVERS: list[DriverSpec] = [
    DriverSpec("verstappen", "Max Verstappen", "red_bull", 17.0, 98, 0.90),
    DriverSpec("norris", "Lando Norris", "mclaren", 17.5, 95, 0.85),
    DriverSpec("leclerc", "Charles Leclerc", "ferrari", 10.8, 90, 0.75),
    DriverSpec("piastri", "Oscar Piastri", "mclaren", 16.3, 88, 0.80),
    DriverSpec("hamilton", "Lewis Hamilton", "ferrari", 6.3, 87, 0.78),
    DriverSpec("russell", "George Russell", "mercedes", 13.4, 85, 0.82),
    DriverSpec("sainz", "Carlos Sainz", "williams", 2.8, 84, 0.80),
    DriverSpec("alonso", "Fernando Alonso", "aston_martin", 2.3, 80, 0.75),
    DriverSpec("antonelli", "Kimi Antonelli", "mercedes", 6.3, 75, 0.65),
    DriverSpec("albon", "Alexander Albon", "williams", 3.2, 72, 0.78),
    DriverSpec("gasly", "Pierre Gasly", "alpine", 0.9, 70, 0.72),
    DriverSpec("hulkenberg", "Nico Hulkenberg", "sauber", 2.1, 68, 0.75),
    DriverSpec("ocon", "Esteban Ocon", "haas", 1.6, 67, 0.70),
    DriverSpec("stroll", "Lance Stroll", "aston_martin", 1.4, 65, 0.70),
    DriverSpec("lawson", "Liam Lawson", "racing_bulls", 1.6, 62, 0.60),
    DriverSpec("hadjar", "Isack Hadjar", "red_bull", 2.3, 60, 0.55),
    DriverSpec("bearman", "Oliver Bearman", "haas", 1.7, 58, 0.55),
    DriverSpec("bortoleto", "Gabriel Bortoleto", "sauber", 0.8, 55, 0.50),
    DriverSpec("colapinto", "Franco Colapinto", "alpine", 0.3, 50, 0.50),
    DriverSpec("lindblad", "Arvid Lindblad", "racing_bulls", 0.5, 52, 0.50),
    DriverSpec("bottas", "Valtteri Bottas", "cadillac", 0.5, 48, 0.65),
    DriverSpec("perez", "Sergio Perez", "cadillac", 0.5, 48, 0.65),
]

CONSTRUCTORS: list[ConstructorSpec] = [
    ConstructorSpec("red_bull", "Red Bull Racing", ("verstappen", "hadjar")),
    ConstructorSpec("mclaren", "McLaren", ("norris", "piastri")),
    ConstructorSpec("ferrari", "Ferrari", ("leclerc", "hamilton")),
    ConstructorSpec("mercedes", "Mercedes", ("russell", "antonelli")),
    ConstructorSpec("williams", "Williams", ("albon", "sainz")),
    ConstructorSpec("aston_martin", "Aston Martin", ("alonso", "stroll")),
    ConstructorSpec("alpine", "Alpine", ("gasly", "colapinto")),
    ConstructorSpec("haas", "Haas", ("ocon", "bearman")),
    ConstructorSpec("sauber", "Sauber", ("hulkenberg", "bortoleto")),
    ConstructorSpec("racing_bulls", "Racing Bulls", ("lawson", "lindblad")),
    ConstructorSpec("cadillac", "Cadillac", ("bottas", "perez")),
]

CALENDAR: list[str] = [
    "Australia", "China", "Japan", "Bahrain", "Saudi Arabia", "Miami",
    "Canada", "Monaco", "Spain", "Austria", "Great Britain", "Belgium",
    "Hungary", "Netherlands", "Italy", "Madrid", "Azerbaijan", "Singapore",
    "United States", "Mexico", "Brazil", "Las Vegas", "Qatar", "Abu Dhabi",
]

# Rounds run as sprint weekends
SPRINT_ROUNDS: frozenset[int] = frozenset({2, 6, 7, 11, 14, 18})

DRIVERS_BY_ID: dict[str, DriverSpec] = {d.asset_id: d for d in DRIVERS}


def race_name(round: int) -> str:
    if 1 <= round <= len(CALENDAR):
        return f"{CALENDAR[round - 1]} Grand Prix"
    return f"Round {round}"


def load_grid(engine: "EconomyEngine") -> None:
    """Register every default driver and constructor on an engine."""
    for spec in DRIVERS:
        engine.add_driver(spec.asset_id, spec.name, spec.previous_average, spec.constructor_id)
    for spec in CONSTRUCTORS:
        average = sum(DRIVERS_BY_ID[d].previous_average for d in spec.driver_ids)
        engine.add_constructor(spec.asset_id, spec.name, average, spec.driver_ids)
