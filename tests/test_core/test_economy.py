"""Tests for the EconomyEngine: commands, race processing and invariants."""

import logging
import threading

import pytest

from paddock.core.enums import AssetKind, TradeAction
from paddock.core.errors import (
    DuplicateAssetError,
    RaceAlreadyProcessedError,
    RaceNotCompleteError,
    RaceOutOfOrderError,
    RejectionReason,
    UnknownAssetError,
)
from paddock.core.models.asset import create_constructor, create_driver
from paddock.core.scoring.engine import SeasonTotals
from paddock.events.types import (
    ContractExpiredEvent,
    PriceChangedEvent,
    RaceProcessedEvent,
    ReserveFilledEvent,
    TradeExecutedEvent,
)


def broken_sweep(*args, **kwargs):
    raise RuntimeError("ledger down")


class TestAssets:
    """Tests for asset registration and lookup."""

    def test_duplicate_asset(self, engine):
        with pytest.raises(DuplicateAssetError):
            engine.register_asset(create_driver("d1", "Again", 10))

    def test_constructor_needs_known_drivers(self, engine):
        with pytest.raises(UnknownAssetError):
            engine.register_asset(create_constructor("c9", "Ghost Racing", 40, ("d1", "ghost")))

    def test_add_driver_prices_from_average(self, engine):
        asset = engine.add_driver("new", "Rookie", previous_season_average=4.46)
        assert asset.price == 45

    def test_list_assets_by_price(self, engine):
        drivers = engine.list_assets(AssetKind.DRIVER)

        assert drivers[0].asset_id == "star"
        assert all(a.is_driver for a in drivers)
        assert len(engine.list_assets()) == 11


class TestCommands:
    """Tests for roster commands through the engine."""

    def test_unknown_roster(self, engine):
        result = engine.buy("missing", "d1")
        assert result.reason == RejectionReason.NOT_FOUND

    def test_buy_returns_snapshot(self, engine, roster):
        result = engine.buy(roster.roster_id, "d1")

        assert result.ok
        assert result.roster["budget"] == 920
        assert result.roster["drivers"][0]["asset_id"] == "d1"

    def test_rejection_logged(self, engine, roster, caplog):
        with caplog.at_level(logging.WARNING):
            engine.buy(roster.roster_id, "ghost")
        assert "not found" in caplog.text

    def test_trade_round_is_completed_races(self, engine, roster, race):
        engine.process_race(race(1))
        engine.process_race(race(2))

        entry = engine.buy(roster.roster_id, "d1").entry

        assert entry.round == 2

    def test_quote_sale(self, engine, roster):
        engine.buy(roster.roster_id, "d1")

        quote = engine.quote_sale(roster.roster_id, "d1")

        assert quote.fee == 20
        assert quote.proceeds == 60
        assert engine.quote_sale(roster.roster_id, "d2") is None

    def test_concurrent_buys_respect_capacity(self, engine, roster):
        """Parallel buys against one roster never overfill it."""
        ids = ["d1", "d2", "d3", "d4", "d5", "d6", "d7", "d8", "star"]
        threads = [threading.Thread(target=engine.buy, args=(roster.roster_id, a)) for a in ids]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert roster.driver_count == 5
        assert roster.budget >= 0
        spent = sum(c.purchase_price for c in roster.drivers)
        assert roster.budget == 1000 - spent


class TestRaceValidation:
    """Tests for race result preconditions."""

    def test_incomplete_result(self, engine, race):
        with pytest.raises(RaceNotCompleteError):
            engine.process_race(race(1, is_complete=False))
        assert engine.completed_races == 0

    def test_duplicate_round(self, engine, race):
        """Applying a round twice would double-count, so it raises."""
        engine.process_race(race(1, {"d1": 10}))
        price = engine.assets["d1"].price

        with pytest.raises(RaceAlreadyProcessedError):
            engine.process_race(race(1, {"d1": 10}))

        assert engine.assets["d1"].price == price
        assert engine.completed_races == 1

    def test_out_of_order(self, engine, race):
        with pytest.raises(RaceOutOfOrderError):
            engine.process_race(race(2))

    def test_unknown_driver_ignored(self, engine, race, caplog):
        with caplog.at_level(logging.WARNING):
            engine.process_race(race(1, {"ghost": 25, "d1": 10}))

        assert "ghost" in caplog.text
        assert engine.completed_races == 1


class TestRaceTransaction:
    """Race processing applies completely or not at all."""

    def test_failure_restores_state(self, engine, roster, race, monkeypatch):
        engine.buy(roster.roster_id, "d1")
        before_roster = roster.to_dict()
        before_prices = {a.asset_id: a.price for a in engine.assets.values()}
        before_log = len(engine.trade_log)

        monkeypatch.setattr(engine.ledger, "sweep", broken_sweep)

        with pytest.raises(RuntimeError):
            engine.process_race(race(1, {"d1": 25}))

        assert roster.to_dict() == before_roster
        assert {a.asset_id: a.price for a in engine.assets.values()} == before_prices
        assert len(engine.trade_log) == before_log
        assert engine.processed_rounds == set()
        assert engine.price_history == []

    def test_round_can_run_after_failure(self, engine, roster, race, monkeypatch):
        engine.buy(roster.roster_id, "d1")
        monkeypatch.setattr(engine.ledger, "sweep", broken_sweep)
        with pytest.raises(RuntimeError):
            engine.process_race(race(1, {"d1": 12}))

        monkeypatch.undo()
        engine.process_race(race(1, {"d1": 12}))

        assert roster.total_points == 12
        assert engine.get_roster(roster.roster_id) is roster

    def test_no_events_on_failure(self, engine, roster, race, monkeypatch):
        seen = []
        engine.event_bus.subscribe_all(seen.append)
        monkeypatch.setattr(engine.ledger, "sweep", broken_sweep)

        with pytest.raises(RuntimeError):
            engine.process_race(race(1))

        assert seen == []


class TestRaceProcessing:
    """Tests for scoring, pricing and bookkeeping order."""

    def test_scores_before_pricing(self, engine, roster, race):
        """The ace ceiling is checked at the pre-race price."""
        engine.buy(roster.roster_id, "d1")
        engine.set_ace(roster.roster_id, "d1")

        summary = engine.process_race(race(1, {"d1": 12}))

        assert summary.points_for(roster.roster_id) == 24
        assert engine.assets["d1"].price == 105

    def test_contract_credited(self, engine, roster, race):
        engine.buy(roster.roster_id, "d1")

        engine.process_race(race(1, {"d1": 25}, positions={"d1": 1}))

        contract = roster.get_contract("d1")
        assert contract.points_scored == 40
        assert contract.races_held == 1
        assert contract.current_price == engine.assets["d1"].price

    def test_price_history_recorded(self, engine, race):
        engine.process_race(race(1, {"d1": 20}))

        history = engine.price_history_for("d1")

        assert len(history) == 1
        assert history[0].round == 1
        assert history[0].new_price == 105

    def test_sprint_weekend_weight(self, engine, race):
        engine.process_race(race(1, {"d1": 8}, sprint_points={"d1": 4}))

        assert engine.assets["d1"].recent_sprint_flags == [True]
        assert engine.assets["d1"].recent_points == [12]

    def test_stored_result_is_a_copy(self, engine, race):
        """Later edits to the submitted entries do not reach the engine."""
        result = race(1, {"d1": 20})
        engine.process_race(result)

        result.entries.clear()

        assert engine.results[1].driver_points("d1") == 20
        assert engine.results[1] == race(1, {"d1": 20})

    def test_summary_snapshots(self, engine, roster, race):
        engine.buy(roster.roster_id, "d1")

        summary = engine.process_race(race(1, {"d1": 5}))

        assert summary.rosters[roster.roster_id]["total_points"] == 5
        assert summary.to_dict()["scores"][roster.roster_id]["total"] == 5


class TestTotals:
    """Season totals agree however they are computed."""

    def test_totals_agree_through_trading(self, engine, roster, race):
        engine.buy(roster.roster_id, "d3")
        engine.buy(roster.roster_id, "c2")
        engine.set_ace(roster.roster_id, "d3")
        engine.process_race(race(1, {"d3": 25, "d7": 6}, positions={"d3": 1}))
        engine.sell(roster.roster_id, "d3")
        engine.buy(roster.roster_id, "d1")
        engine.process_race(race(2, {"d1": 18, "d8": 2}, positions={"d1": 2}))

        expected = roster.total_points
        assert SeasonTotals.compute(roster) == expected
        assert SeasonTotals.from_contracts(roster) == expected
        assert engine.season_total(roster.roster_id) == expected
        assert roster.bonus_points > 0

    def test_memoized_per_race(self, engine, roster, race):
        engine.process_race(race(1))
        totals = engine.season_totals

        engine.season_total(roster.roster_id)
        engine.season_total(roster.roster_id)
        assert totals.computations == 1

        engine.process_race(race(2))
        engine.season_total(roster.roster_id)
        assert totals.computations == 2


class TestEvents:
    """Tests for events emitted by the engine."""

    def test_trade_event(self, engine, roster):
        seen = []
        engine.event_bus.subscribe(TradeExecutedEvent, seen.append)

        engine.buy(roster.roster_id, "d1")

        assert len(seen) == 1
        assert seen[0].entry.action == TradeAction.BUY
        assert seen[0].roster_id == roster.roster_id

    def test_no_event_on_rejection(self, engine, roster):
        seen = []
        engine.event_bus.subscribe(TradeExecutedEvent, seen.append)

        engine.buy(roster.roster_id, "ghost")

        assert seen == []

    def test_race_events(self, engine, roster, race):
        seen = []
        engine.event_bus.subscribe_all(seen.append)

        engine.process_race(race(1, {"d1": 20}))

        kinds = {type(e) for e in seen}
        assert PriceChangedEvent in kinds
        assert isinstance(seen[-1], RaceProcessedEvent)
        assert seen[-1].round == 1

    def test_expiry_and_reserve_events(self, engine, roster, race):
        for asset_id in ["d4", "d5", "d6", "d7", "d8"]:
            engine.buy(roster.roster_id, asset_id)
        expired = []
        filled = []
        engine.event_bus.subscribe(ContractExpiredEvent, expired.append)
        engine.event_bus.subscribe(ReserveFilledEvent, filled.append)

        for rnd in range(1, 7):
            engine.process_race(race(rnd))

        assert len(expired) == 5
        assert all(e.lockout_expires_at == 6 for e in expired)
        assert len(filled) == 1
        assert filled[0].slots_still_empty == 0


class TestSerialization:
    def test_engine_snapshot(self, engine, roster, race):
        engine.buy(roster.roster_id, "d1")
        engine.process_race(race(1))

        data = engine.to_dict()

        assert data["completed_races"] == 1
        assert roster.roster_id in data["rosters"]
        assert len(data["trade_log"]["entries"]) == len(engine.trade_log)
        assert data["config"]["version"] == "v6"
