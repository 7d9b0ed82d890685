"""Default season data."""

from paddock.data.grid import (
    CALENDAR,
    CONSTRUCTORS,
    DRIVERS,
    SPRINT_ROUNDS,
    ConstructorSpec,
    DriverSpec,
    load_grid,
    race_name,
)

__all__ = [
    "CALENDAR",
    "CONSTRUCTORS",
    "DRIVERS",
    "SPRINT_ROUNDS",
    "ConstructorSpec",
    "DriverSpec",
    "load_grid",
    "race_name",
]
