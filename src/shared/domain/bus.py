"""Contracts between event publishers and their subscribers.

Publishers (services) only know ``IEventBus``; subscribers (for example the
notifications app) register an ``IEventHandler`` per event class when their
app is ready.
"""

from __future__ import annotations

from typing import Generic, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

EventT = TypeVar("EventT", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[EventT]):
    """Reacts to one event class; exceptions propagate to the publisher."""

    def handle(self, event: EventT) -> None: ...


class IEventBus(Protocol):
    def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to every handler subscribed to its exact class."""

    def subscribe(
        self, event_class: Type[EventT], handler: IEventHandler[EventT]
    ) -> None: ...

    def unsubscribe(
        self, event_class: Type[EventT], handler: IEventHandler[EventT]
    ) -> None: ...
