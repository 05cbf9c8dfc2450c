"""Delivery of persisted events to observers.

Observers are plain callables taking one event. Delivery happens after the
events are durably saved, on the caller's task, one event at a time and, for
each event, one observer at a time in registration order.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from ..domain import Event, event_type

LOGGER = logging.getLogger(__name__)

Observer = Callable[[Event], Awaitable[Any] | Any]


class ObserverDelivery(ABC):
    """Abstract strategy for delivering events to observers.

    Implementations:
    - SynchronousDelivery: Observer errors propagate to the caller
    - IsolatedDelivery: Observer errors are logged and delivery continues
    """

    def __init__(self, observers: Sequence[Observer]):
        """Initialize the delivery.

        Args:
            observers: Callables notified of each event, in order. An
                observer returning an awaitable is awaited before the next
                observer is called.
        """
        self.observers = list(observers)

    async def deliver(self, events: Sequence[Event]) -> None:
        """Deliver events as A(e1), B(e1), A(e2), B(e2) for observers A, B."""
        for event in events:
            for observer in self.observers:
                await self.notify(observer, event)

    @abstractmethod
    async def notify(self, observer: Observer, event: Event) -> None:
        """Notify a single observer of a single event."""
        ...


async def _call(observer: Observer, event: Event) -> None:
    result = observer(event)
    if inspect.isawaitable(result):
        await result


class SynchronousDelivery(ObserverDelivery):
    """Delivery where a failing observer fails the whole delivery.

    Characteristics:
    - Observers run on the caller's task, so slow observers slow the caller
    - The first exception aborts the remaining observer calls and propagates
    - The events are already persisted when an observer fails; nothing is
      rolled back

    Example:
        >>> delivery = SynchronousDelivery([audit_log.append])
        >>> await delivery.deliver(events)
    """

    async def notify(self, observer: Observer, event: Event) -> None:
        await _call(observer, event)


class IsolatedDelivery(ObserverDelivery):
    """Delivery that logs observer failures and keeps going.

    Example:
        >>> delivery = IsolatedDelivery([send_email, audit_log.append])
        >>> await delivery.deliver(events)  # send_email failing is only logged
    """

    async def notify(self, observer: Observer, event: Event) -> None:
        try:
            await _call(observer, event)
        except Exception:
            LOGGER.exception(
                "Observer failed",
                extra={
                    "observer": getattr(observer, "__qualname__", repr(observer)),
                    "event_type": event_type(event),
                    "aggregate_id": event.aggregate_id,
                    "version": event.version,
                },
            )
