"""Tests for the event bus."""

from paddock.events import EventBus
from paddock.events.types import (
    ContractExpiredEvent,
    RaceProcessedEvent,
    TradeExecutedEvent,
)


class TestEventBus:
    """Tests for subscribe / emit."""

    def test_typed_subscription(self):
        bus = EventBus()
        received = []
        bus.subscribe(ContractExpiredEvent, received.append)

        bus.emit(ContractExpiredEvent(roster_id="r1", asset_id="d1"))
        bus.emit(TradeExecutedEvent(roster_id="r1"))

        assert len(received) == 1
        assert received[0].asset_id == "d1"

    def test_global_handlers_run_after_typed(self):
        """Type-specific handlers fire before global ones."""
        bus = EventBus()
        order = []
        bus.subscribe_all(lambda e: order.append("global"))
        bus.subscribe(RaceProcessedEvent, lambda e: order.append("typed"))

        bus.emit(RaceProcessedEvent(round=3))

        assert order == ["typed", "global"]

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe(TradeExecutedEvent, received.append)
        bus.unsubscribe(TradeExecutedEvent, received.append)

        bus.emit(TradeExecutedEvent())

        assert received == []

    def test_unsubscribe_unknown_handler(self):
        """Removing a handler that was never added is a no-op."""
        bus = EventBus()
        bus.unsubscribe(TradeExecutedEvent, print)
        bus.unsubscribe_all(print)

        assert bus.handler_count() == 0

    def test_handler_may_unsubscribe_while_emitting(self):
        bus = EventBus()
        calls = []

        def once(event):
            calls.append(event)
            bus.unsubscribe(TradeExecutedEvent, once)

        bus.subscribe(TradeExecutedEvent, once)
        bus.emit(TradeExecutedEvent())
        bus.emit(TradeExecutedEvent())

        assert len(calls) == 1

    def test_handler_count_and_clear(self):
        bus = EventBus()
        bus.subscribe(TradeExecutedEvent, print)
        bus.subscribe(ContractExpiredEvent, print)
        bus.subscribe_all(print)

        assert bus.handler_count(TradeExecutedEvent) == 1
        assert bus.handler_count() == 3

        bus.clear()

        assert bus.handler_count() == 0
