"""
League Aggregator.

Cross-roster statistics for rosters that share a league: per-race
winners, race-win tallies and season standings.

Race winner rule: the roster with the strictly highest points that
round wins it. A tie for the top score awards no winner, and neither
does a round where the best score is zero or less. Leagues with fewer
than two rosters produce no winners. A roster with no entry for a round
counts as scoring 0.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from paddock.core.models.roster import Roster


MIN_COMPETITORS = 2


@dataclass
class LeagueStanding:
    """Standings row for one roster."""
    rank: int
    roster_id: str
    name: str
    total_points: int
    race_wins: int = 0
    races_scored: int = 0

    @property
    def average_points(self) -> float:
        if self.races_scored == 0:
            return 0.0
        return self.total_points / self.races_scored

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "roster_id": self.roster_id,
            "name": self.name,
            "total_points": self.total_points,
            "race_wins": self.race_wins,
            "races_scored": self.races_scored,
        }


def race_winners(series: dict[str, dict[int, int]]) -> dict[int, Optional[str]]:
    """
    Winner per round from each roster's round -> points series.

    Rounds with no outright winner map to None.
    """
    if len(series) < MIN_COMPETITORS:
        return {}
    rounds = sorted({r for points in series.values() for r in points})
    winners: dict[int, Optional[str]] = {}
    for rnd in rounds:
        scores = {roster_id: points.get(rnd, 0) for roster_id, points in series.items()}
        best = max(scores.values())
        leaders = [roster_id for roster_id, pts in scores.items() if pts == best]
        winners[rnd] = leaders[0] if best > 0 and len(leaders) == 1 else None
    return winners


def race_wins(series: dict[str, dict[int, int]]) -> dict[str, int]:
    """Race-win tally per roster (every roster present, zero if winless)."""
    tally = {roster_id: 0 for roster_id in series}
    for winner in race_winners(series).values():
        if winner is not None:
            tally[winner] += 1
    return tally


class LeagueAggregator:
    """Derives league statistics from rosters and their season totals."""

    def series_for(self, rosters: list["Roster"]) -> dict[str, dict[int, int]]:
        return {r.roster_id: dict(r.race_history) for r in rosters}

    def race_wins(self, rosters: list["Roster"]) -> dict[str, int]:
        return race_wins(self.series_for(rosters))

    def race_winners(self, rosters: list["Roster"]) -> dict[int, Optional[str]]:
        return race_winners(self.series_for(rosters))

    def standings(self, rosters: list["Roster"], totals: dict[str, int]) -> list[LeagueStanding]:
        """
        Rank rosters by season total.

        Ties on points are broken by roster name, then roster id, so the
        order is stable. Tied rosters still get distinct ranks.
        """
        wins = self.race_wins(rosters)
        ordered = sorted(
            rosters,
            key=lambda r: (-totals.get(r.roster_id, 0), r.name, r.roster_id),
        )
        return [
            LeagueStanding(
                rank=i,
                roster_id=r.roster_id,
                name=r.name,
                total_points=totals.get(r.roster_id, 0),
                race_wins=wins.get(r.roster_id, 0),
                races_scored=len(r.race_history),
            )
            for i, r in enumerate(ordered, start=1)
        ]
