"""League-wide statistics: race wins and standings."""

from paddock.core.league.aggregator import (
    LeagueAggregator,
    LeagueStanding,
    race_winners,
    race_wins,
)

__all__ = [
    "LeagueAggregator",
    "LeagueStanding",
    "race_winners",
    "race_wins",
]
