from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information

    Note:
        Used as default_factory for Event.occurred_at to ensure all
        events are timestamped in UTC regardless of system timezone.
    """
    return datetime.now(tz=timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values are returned unchanged."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Event(BaseModel):
    """Immutable record of something that happened to one aggregate.

    Event is the core data structure in event sourcing. Subclasses add the
    payload fields specific to what happened and inherit the metadata that
    every event carries:

    - **Immutable**: Instances are frozen once created
    - **Ordered**: ``version`` is unique and strictly increasing per aggregate
    - **Timestamped**: ``occurred_at`` records when the event happened (UTC)
    - **Typed**: The type tag used for serialization defaults to the class
      name and may be overridden with the ``event_type`` class variable

    Attributes:
        aggregate_id: ID of the aggregate the event belongs to
        version: Position in the aggregate's history (1-indexed)
        occurred_at: When the event occurred

    Examples:
        >>> class AccountOpened(Event):
        ...     owner: str
        >>>
        >>> class FundsMoved(Event):
        ...     event_type = "funds-moved.v2"
        ...     amount: int
        >>>
        >>> opened = AccountOpened(aggregate_id="acc-1", version=1, owner="Alice")
    """

    model_config = ConfigDict(frozen=True)

    event_type: ClassVar[str | None] = None

    aggregate_id: str = Field(
        min_length=1,
        description="ID of the aggregate that produced this event",
    )
    version: int = Field(
        ge=1,
        description="Position in the aggregate's history (1-indexed, strictly increasing)",
    )
    occurred_at: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (naive values are read as UTC)",
    )

    @field_validator("occurred_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


def event_type(event: Event | type[Event] | Any) -> str:
    """Get the type tag of an event or event class.

    The tag is the ``event_type`` class variable when one is set, otherwise
    the class name.

    Examples:
        >>> event_type(AccountOpened)
        'AccountOpened'
        >>> event_type(FundsMoved(aggregate_id="acc-1", version=2, amount=5))
        'funds-moved.v2'
    """
    cls = event if isinstance(event, type) else type(event)
    return getattr(cls, "event_type", None) or cls.__name__
