"""Seeded season simulation for the roster economy."""

from paddock.simulation.race import RaceSimulator
from paddock.simulation.season import SeasonReport, SeasonSimulator, PriceMover
from paddock.simulation.strategies import STRATEGIES, RosterStrategy

__all__ = [
    "RaceSimulator",
    "SeasonReport",
    "SeasonSimulator",
    "PriceMover",
    "STRATEGIES",
    "RosterStrategy",
]
