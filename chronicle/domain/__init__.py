"""Domain primitives for event sourcing.

This module contains the core building blocks that users extend to create
their domain models:

- Aggregate: Base class for state rebuilt by folding events
- Command: Base class for requests to change one aggregate
- Event: Base class for immutable, versioned facts about one aggregate
- EventSourcingError and its subclasses: Coded errors with cause chains
"""

from .aggregate import Aggregate, CommandHandler, Folds
from .command import Command
from .event import Event, as_utc, event_type, utc_now
from .exceptions import (
    AggregateNotFoundError,
    AggregateNotSavedError,
    ConcurrencyError,
    ErrorKind,
    EventSourcingError,
    InvalidArgumentError,
    InvalidEncodingError,
    UnboundEventTypeError,
    UnhandledCommandError,
    UnhandledEventError,
    has_kind,
    is_not_found,
    new_error,
)
from .ids import new_aggregate_id

__all__ = [
    "Aggregate",
    "CommandHandler",
    "Folds",
    "Command",
    "Event",
    "as_utc",
    "event_type",
    "utc_now",
    "new_aggregate_id",
    # Errors
    "ErrorKind",
    "EventSourcingError",
    "InvalidArgumentError",
    "InvalidEncodingError",
    "UnboundEventTypeError",
    "AggregateNotFoundError",
    "AggregateNotSavedError",
    "UnhandledCommandError",
    "UnhandledEventError",
    "ConcurrencyError",
    "has_kind",
    "is_not_found",
    "new_error",
]
