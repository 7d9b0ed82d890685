"""Tests for race results."""

from dataclasses import FrozenInstanceError

import pytest

from paddock.core.enums import FinishStatus
from paddock.core.models.results import (
    RaceResult,
    ResultEntry,
    build_race_result,
)


class TestResultEntry:
    """Tests for ResultEntry."""

    def test_from_finish_scores_position(self):
        """Points should come from the race table."""
        entry = ResultEntry.from_finish("d1", 1)

        assert entry.raw_points == 25
        assert entry.is_podium

    def test_from_finish_sprint_table(self):
        entry = ResultEntry.from_finish("d1", 1, sprint=True)
        assert entry.raw_points == 8

    def test_outside_points(self):
        entry = ResultEntry.from_finish("d1", 11)

        assert entry.raw_points == 0
        assert entry.classified
        assert not entry.is_podium

    def test_dnf_scores_nothing(self):
        """Unclassified drivers get no points and no position."""
        entry = ResultEntry.from_finish("d1", None)

        assert entry.raw_points == 0
        assert entry.position is None
        assert entry.status == FinishStatus.DNF
        assert not entry.is_podium

    def test_disqualified_penalty(self):
        """A disqualification costs points whatever the position."""
        entry = ResultEntry.from_finish("d1", 3, status=FinishStatus.DSQ)

        assert entry.status == FinishStatus.DSQ
        assert entry.raw_points == -5
        assert entry.points() == -5
        assert not entry.classified

    def test_disqualified_penalty_configurable(self):
        entry = ResultEntry.from_finish("d1", 3, status=FinishStatus.DSQ, dsq_penalty=-10)
        assert entry.raw_points == -10

    def test_dnf_has_no_penalty(self):
        entry = ResultEntry.from_finish("d1", None, status=FinishStatus.DNF, grid_position=1)
        assert entry.raw_points == 0

    def test_positions_gained(self):
        """Each grid place gained is worth a point."""
        entry = ResultEntry.from_finish("d1", 3, grid_position=8)

        assert entry.positions_gained == 5
        assert entry.raw_points == 20

    def test_positions_lost(self):
        entry = ResultEntry.from_finish("d1", 12, grid_position=4)

        assert entry.positions_gained == -8
        assert entry.raw_points == -8

    def test_position_bonus_scaled(self):
        entry = ResultEntry.from_finish("d1", 1, grid_position=3, position_gained_bonus=2)
        assert entry.raw_points == 29

    def test_no_grid_no_bonus(self):
        entry = ResultEntry.from_finish("d1", 3)

        assert entry.positions_gained == 0
        assert entry.raw_points == 15

    def test_sprint_ignores_grid(self):
        entry = ResultEntry.from_finish("d1", 2, sprint=True, grid_position=9)
        assert entry.raw_points == 7

    def test_fastest_lap_bonus_inside_top_ten(self):
        entry = ResultEntry.from_finish("d1", 4, fastest_lap=True)
        assert entry.points() == 13

    def test_fastest_lap_bonus_outside_top_ten(self):
        """Fastest lap outside the top ten pays nothing."""
        entry = ResultEntry.from_finish("d1", 14, fastest_lap=True)
        assert entry.points() == 0

    def test_sprint_never_has_fastest_lap(self):
        entry = ResultEntry.from_finish("d1", 1, sprint=True, fastest_lap=True)
        assert not entry.fastest_lap

    def test_dict_roundtrip(self):
        entry = ResultEntry.from_finish("d1", 3, fastest_lap=True, grid_position=5)
        assert ResultEntry.from_dict(entry.to_dict()) == entry


class TestRaceResult:
    """Tests for RaceResult and build_race_result."""

    def test_build_from_order(self):
        """build_race_result should score a finishing order."""
        result = build_race_result(1, ["a", "b", "c"], dnfs=("d",), fastest_lap="b")

        assert result.is_complete
        assert result.driver_points("a") == 25
        assert result.driver_points("b") == 19
        assert result.driver_points("d") == 0
        assert result.finish_position("c") == 3
        assert result.finish_position("d") is None

    def test_sprint_points_added(self):
        """Sprint points should be added to race points."""
        result = build_race_result(2, ["a", "b"], sprint_order=["b", "a"])

        assert result.has_sprint
        assert result.driver_points("a") == 25 + 7
        assert result.driver_points("b") == 18 + 8

    def test_absent_driver_scores_zero(self):
        result = build_race_result(1, ["a"])
        assert result.driver_points("ghost") == 0

    def test_combined_points(self):
        """Constructors score the sum of both drivers."""
        result = build_race_result(1, ["a", "b", "c"])
        assert result.combined_points(("a", "c")) == 40

    def test_is_podium(self):
        result = build_race_result(1, ["a", "b", "c", "d"])

        assert result.is_podium("c")
        assert not result.is_podium("d")
        assert not result.is_podium("ghost")

    def test_default_result_incomplete(self):
        """Results are only final once the provider marks them complete."""
        assert not RaceResult(round=1).is_complete

    def test_result_is_frozen(self):
        result = build_race_result(1, ["a"])

        with pytest.raises(FrozenInstanceError):
            result.is_complete = False

    def test_dict_roundtrip(self):
        result = build_race_result(3, ["a", "b"], sprint_order=["a"], name="Test GP")
        restored = RaceResult.from_dict(result.to_dict())

        assert restored.name == "Test GP"
        assert restored.driver_points("a") == result.driver_points("a")
        assert restored.has_sprint
