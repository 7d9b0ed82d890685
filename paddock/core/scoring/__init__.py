"""Race scoring and season totals."""

from paddock.core.scoring.engine import (
    ScoringEngine,
    RaceScore,
    ContractScore,
    SeasonTotals,
    late_joiner_catch_up,
)

__all__ = [
    "ScoringEngine",
    "RaceScore",
    "ContractScore",
    "SeasonTotals",
    "late_joiner_catch_up",
]
