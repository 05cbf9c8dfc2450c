"""Serializers converting events to and from persisted records."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError

from ..domain.event import Event, event_type
from ..domain.exceptions import (
    InvalidArgumentError,
    InvalidEncodingError,
    UnboundEventTypeError,
)
from .store import History, Record


class Serializer(ABC):
    """Converts between events and records.

    Implementations own a registry of the event types they can decode,
    populated with ``bind``.
    """

    @abstractmethod
    def bind(self, *events: type[Event] | Event) -> None:
        """Register event types so records of those types can be decoded."""
        ...

    @abstractmethod
    def marshal_event(self, event: Event) -> Record:
        """Convert an event into its persisted form.

        Raises:
            InvalidEncodingError: If the event cannot be encoded.
        """
        ...

    @abstractmethod
    def unmarshal_event(self, record: Record) -> Event:
        """Convert a persisted record back into an event.

        Raises:
            InvalidEncodingError: If the record cannot be decoded.
            UnboundEventTypeError: If the record's type tag was never bound.
        """
        ...


class Envelope(BaseModel):
    """JSON wrapper persisted for every event.

    Attributes:
        t: The event's type tag.
        d: The encoded event payload.
    """

    t: str
    d: dict[str, Any]


class JSONSerializer(Serializer):
    """Serializer storing events as JSON envelopes.

    Each record holds ``{"t": "<type tag>", "d": <event payload>}`` encoded as
    UTF-8 JSON. The tag registry belongs to this instance only.

    Examples:
        >>> serializer = JSONSerializer(AccountOpened, MoneyDeposited)
        >>> record = serializer.marshal_event(
        ...     AccountOpened(aggregate_id="acc-1", version=1, owner="Alice")
        ... )
        >>> serializer.unmarshal_event(record).owner
        'Alice'
    """

    def __init__(self, *events: type[Event] | Event) -> None:
        """Initialize the serializer and bind the given event types.

        Args:
            *events: Event classes (or instances) to bind. ``bind`` may be
                called later to add more.
        """
        self.event_types: dict[str, type[Event]] = {}
        self.bind(*events)

    def bind(self, *events: type[Event] | Event) -> None:
        """Register event types; may be called more than once.

        Binding a second type under an existing tag replaces the first.

        Raises:
            InvalidArgumentError: If an argument is not an Event class or instance.
        """
        for event in events:
            cls = event if isinstance(event, type) else type(event)
            if not issubclass(cls, Event):
                raise InvalidArgumentError(f"cannot bind {cls.__name__}, it is not an Event")
            self.event_types[event_type(cls)] = cls

    def marshal_event(self, event: Event) -> Record:
        try:
            data = event.model_dump(mode="json")
        except PydanticSerializationError as e:
            raise InvalidEncodingError("unable to encode data", cause=e) from e

        try:
            envelope = Envelope(t=event_type(event), d=data).model_dump_json()
        except (ValidationError, PydanticSerializationError) as e:
            raise InvalidEncodingError("unable to encode event", cause=e) from e

        return Record(version=event.version, data=envelope.encode("utf-8"))

    def unmarshal_event(self, record: Record) -> Event:
        try:
            envelope = Envelope.model_validate_json(record.data)
        except ValidationError as e:
            raise InvalidEncodingError("unable to unmarshal event", cause=e) from e

        cls = self.event_types.get(envelope.t)
        if cls is None:
            raise UnboundEventTypeError(f"unbound event type, {envelope.t}")

        try:
            return cls.model_validate(envelope.d)
        except ValidationError as e:
            raise InvalidEncodingError(
                f"unable to unmarshal event data into {cls.__name__}", cause=e
            ) from e

    def marshal_all(self, *events: Event) -> History:
        """Marshal several events into a history, preserving their order."""
        return [self.marshal_event(event) for event in events]
