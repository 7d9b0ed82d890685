"""Tests for contracts, lockouts and the contract ledger sweep."""

import pytest

from paddock.core.config import EconomyConfig
from paddock.core.contracts.contract import Contract
from paddock.core.contracts.ledger import ContractLedger
from paddock.core.enums import AssetKind, SlotStatus, TradeAction
from paddock.core.errors import RejectionReason


def contract_for(asset_id="d1", price=50, length=5, races_held=0, kind=AssetKind.DRIVER):
    return Contract(
        asset_id=asset_id,
        kind=kind,
        purchase_price=price,
        current_price=price,
        contract_length=length,
        added_at_race=0,
        races_held=races_held,
    )


class TestContract:
    """Tests for the Contract model."""

    def test_races_remaining(self):
        contract = contract_for(races_held=2)

        assert contract.races_remaining == 3
        assert not contract.is_expired

    def test_expired_at_length(self):
        contract = contract_for(races_held=5)

        assert contract.races_remaining == 0
        assert contract.is_expired

    def test_open_ended_never_expires(self):
        """Length 0 means the contract runs for the whole season."""
        contract = contract_for(length=0, races_held=40)

        assert not contract.is_expired
        assert contract.races_remaining == 0

    def test_profit(self):
        contract = contract_for(price=50)
        contract.sync_price(72)
        assert contract.profit == 22

    def test_credit_and_advance(self):
        contract = contract_for()
        contract.credit(12)
        contract.credit(-3)
        contract.advance()

        assert contract.points_scored == 9
        assert contract.races_held == 1

    def test_dict_roundtrip(self):
        contract = contract_for(races_held=2)
        contract.points_scored = 17
        restored = Contract.from_dict(contract.to_dict())

        assert restored.contract_id == contract.contract_id
        assert restored.points_scored == 17
        assert restored.races_remaining == 3


class TestLockouts:
    """Tests for roster lockout bookkeeping."""

    def test_locked_until_expiry(self, bare_roster):
        bare_roster.add_lockout("d1", AssetKind.DRIVER, expires_at=6)

        assert bare_roster.is_locked_out("d1", 5)
        assert bare_roster.lockout_races_remaining("d1", 5) == 1
        assert not bare_roster.is_locked_out("d1", 6)

    def test_prune_is_idempotent(self, bare_roster):
        """Pruning twice should release each lockout once."""
        bare_roster.add_lockout("d1", AssetKind.DRIVER, expires_at=6)
        bare_roster.add_lockout("c1", AssetKind.CONSTRUCTOR, expires_at=8)

        assert bare_roster.prune_lockouts(6) == ["d1"]
        assert bare_roster.prune_lockouts(6) == []
        assert "c1" in bare_roster.constructor_lockouts

    def test_slots_view(self, bare_roster):
        """Slots list held contracts, then pending lockouts, then empties."""
        bare_roster.add_contract(contract_for("d1"))
        bare_roster.add_lockout("d2", AssetKind.DRIVER, expires_at=3)

        statuses = [s.status for s in bare_roster.slots(completed_races=2)]

        assert statuses == [
            SlotStatus.HELD,
            SlotStatus.PENDING_LOCKOUT,
            SlotStatus.EMPTY,
            SlotStatus.EMPTY,
            SlotStatus.EMPTY,
        ]

    def test_constructor_lockout_not_a_slot(self, bare_roster):
        bare_roster.add_lockout("c1", AssetKind.CONSTRUCTOR, expires_at=3)

        statuses = {s.status for s in bare_roster.slots(completed_races=2)}

        assert statuses == {SlotStatus.EMPTY}


class TestLedgerSweep:
    """Tests for ContractLedger.sweep on a single roster."""

    @pytest.fixture
    def ledger(self, config, assets, transfers) -> ContractLedger:
        return ContractLedger(config, assets, transfers)

    def test_expiry_sells_at_market_price(self, ledger, assets, bare_roster):
        """Expiry pays the full market price with no fee."""
        contract = contract_for("d2", price=60, races_held=4)
        contract.points_scored = 21
        bare_roster.add_contract(contract)
        assets["d2"].price = 72
        budget = bare_roster.budget

        outcome = ledger.sweep(bare_roster, completed_races=5)

        assert outcome.expired_ids == ["d2"]
        assert bare_roster.budget == budget + 72
        assert bare_roster.locked_points == 21
        assert bare_roster.bonus_points == 0
        entry = outcome.expiry_entries[0]
        assert entry.action == TradeAction.SELL_EXPIRY
        assert entry.proceeds == 72
        assert entry.fee == 0

    def test_expiry_registers_lockout(self, ledger, bare_roster):
        bare_roster.add_contract(contract_for("d2", races_held=4))

        ledger.sweep(bare_roster, completed_races=5)

        assert bare_roster.driver_lockouts == {"d2": 6}

    def test_not_yet_expired(self, ledger, bare_roster):
        bare_roster.add_contract(contract_for("d2", races_held=3))

        outcome = ledger.sweep(bare_roster, completed_races=4)

        assert outcome.expired == []
        assert bare_roster.get_contract("d2").races_held == 4

    def test_expiry_clears_ace(self, ledger, transfers, bare_roster):
        bare_roster.add_contract(contract_for("d2", races_held=4))
        transfers.set_ace(bare_roster, "d2")

        ledger.sweep(bare_roster, completed_races=5)

        assert bare_roster.ace is None

    def test_release_skips_missing_contract(self, transfers, bare_roster):
        """A contract already gone from the roster is skipped, not an error."""
        assert transfers.release_expired(bare_roster, contract_for("d2"), 5) is None
        assert len(transfers.trade_log) == 0

    def test_sync_prices(self, ledger, assets, bare_roster):
        bare_roster.add_contract(contract_for("d2", price=60))
        assets["d2"].price = 66

        ledger.sync_prices(bare_roster)

        assert bare_roster.get_contract("d2").current_price == 66


class TestContractLifecycle:
    """End-to-end contract expiry through the engine."""

    @pytest.fixture
    def held_roster(self, engine, roster):
        for asset_id in ["d3", "d4", "d5", "d6", "d7"]:
            assert engine.buy(roster.roster_id, asset_id).ok
        return roster

    def run_d3_races(self, engine, race, points):
        for pts in points:
            engine.process_race(race(engine.completed_races + 1, {"d3": pts}))

    def test_expires_exactly_at_length(self, engine, race, held_roster):
        """Bought before race 1, the contract ends with race 5."""
        self.run_d3_races(engine, race, [10, 8, 6, 4])
        assert held_roster.get_contract("d3").races_held == 4

        self.run_d3_races(engine, race, [2])

        assert not held_roster.holds("d3")
        assert held_roster.driver_count == 0
        assert held_roster.locked_points == 30

    def test_expiry_proceeds_and_lockout(self, engine, race, held_roster):
        self.run_d3_races(engine, race, [10, 8, 6, 4, 2])

        expiry = [e for e in engine.trade_log.get_expiries(held_roster.roster_id)
                  if e.asset_id == "d3"]
        assert len(expiry) == 1
        assert expiry[0].round == 5
        assert expiry[0].proceeds == engine.assets["d3"].price == 60

        result = engine.buy(held_roster.roster_id, "d3")
        assert result.reason == RejectionReason.LOCKED_OUT
        assert result.lockout_races_remaining == 1

    def test_selling_expired_driver_reports_lockout(self, engine, race, held_roster):
        self.run_d3_races(engine, race, [10, 8, 6, 4, 2])
        budget = held_roster.budget

        result = engine.sell(held_roster.roster_id, "d3")

        assert result.reason == RejectionReason.LOCKED_OUT
        assert result.lockout_races_remaining == 1
        assert held_roster.budget == budget

    def test_repurchasable_after_lockout(self, engine, race, held_roster):
        """One race later the lockout is pruned and d3 can come back."""
        self.run_d3_races(engine, race, [10, 8, 6, 4, 2, 0])

        assert held_roster.driver_lockouts == {}
        assert not held_roster.is_locked_out("d3", engine.completed_races)
        # Reserve auto-fill took the five cheapest drivers meanwhile
        assert held_roster.driver_count == 5
        sold = held_roster.driver_ids[0]
        assert engine.sell(held_roster.roster_id, sold).ok
        assert engine.buy(held_roster.roster_id, "d3").ok

    def test_totals_consistent_after_expiry(self, engine, race, held_roster):
        """Locked points keep counting toward the season total."""
        from paddock.core.scoring.engine import SeasonTotals

        self.run_d3_races(engine, race, [10, 8, 6, 4, 2, 0])

        # Race 6 was the sixth without a voluntary transfer
        assert held_roster.penalty_points == 5
        assert held_roster.total_points == 25
        assert SeasonTotals.from_contracts(held_roster) == 25
        assert engine.season_total(held_roster.roster_id) == 25

    def test_constructor_lockout(self, make_engine, race):
        config = EconomyConfig(contract_length=2)
        engine = make_engine(config)
        roster = engine.create_roster("o", "Team C")
        engine.buy(roster.roster_id, "c2")
        engine.process_race(race(1))
        for asset_id in ["d4", "d5", "d6", "d7", "d8"]:
            engine.buy(roster.roster_id, asset_id)

        engine.process_race(race(2))

        assert roster.constructor is None
        assert roster.constructor_lockouts == {"c2": 3}
        assert roster.driver_count == 5
        assert engine.buy(roster.roster_id, "c2").reason == RejectionReason.LOCKED_OUT

    def test_open_ended_contracts(self, make_engine, race):
        """Without contracts, holdings never expire."""
        engine = make_engine(EconomyConfig.for_version("v3"))
        roster = engine.create_roster("o", "Forever")
        for asset_id in ["d4", "d5", "d6", "d7", "d8"]:
            engine.buy(roster.roster_id, asset_id)

        for rnd in range(1, 9):
            engine.process_race(race(rnd))

        assert roster.driver_count == 5
        assert all(c.races_held == 8 for c in roster.drivers)
        assert engine.trade_log.get_expiries() == []
