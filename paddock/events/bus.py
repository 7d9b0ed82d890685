"""Event bus for pub/sub communication."""

from collections import defaultdict
from typing import Callable, TypeVar

from paddock.events.types import EconomyEvent

T = TypeVar("T", bound=EconomyEvent)
EventHandler = Callable[[EconomyEvent], None]


class EventBus:
    """
    Pub/sub bus between the economy engine and whoever notifies users.

    The engine emits trade, expiry, price and race events without knowing
    who listens. Handlers run synchronously, in subscription order.

    Example:
        bus = EventBus()

        def on_expiry(event: ContractExpiredEvent):
            notify(event.roster_id, f"{event.asset_id} contract expired")

        bus.subscribe(ContractExpiredEvent, on_expiry)
    """

    def __init__(self) -> None:
        self._handlers: dict[type[EconomyEvent], list[EventHandler]] = defaultdict(list)
        self._global_handlers: list[EventHandler] = []

    def subscribe(
        self,
        event_type: type[T],
        handler: Callable[[T], None],
    ) -> None:
        """Register a handler for one event type."""
        self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Register a handler that receives every event."""
        self._global_handlers.append(handler)

    def unsubscribe(
        self,
        event_type: type[T],
        handler: Callable[[T], None],
    ) -> None:
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)

    def unsubscribe_all(self, handler: EventHandler) -> None:
        if handler in self._global_handlers:
            self._global_handlers.remove(handler)

    def emit(self, event: EconomyEvent) -> None:
        """
        Deliver an event.

        Type-specific handlers run first, then global handlers.
        """
        for handler in list(self._handlers[type(event)]):
            handler(event)

        for handler in list(self._global_handlers):
            handler(event)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        self._global_handlers.clear()

    def handler_count(self, event_type: type[EconomyEvent] | None = None) -> int:
        """
        Number of registered handlers.

        With no event type, counts every handler including global ones.
        """
        if event_type is None:
            total = sum(len(handlers) for handlers in self._handlers.values())
            return total + len(self._global_handlers)
        return len(self._handlers[event_type])
