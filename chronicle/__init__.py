"""Chronicle - Event Sourcing persistence for Python.

This module provides the public API for building event-sourced aggregates:
a Repository that rebuilds aggregates by replaying versioned events, backed
by pluggable Store and Serializer implementations.
"""

from .aggregates import Repository
from .config import RepositorySettings
from .domain import (
    Aggregate,
    AggregateNotFoundError,
    AggregateNotSavedError,
    Command,
    CommandHandler,
    ConcurrencyError,
    ErrorKind,
    Event,
    EventSourcingError,
    InvalidArgumentError,
    InvalidEncodingError,
    UnboundEventTypeError,
    UnhandledCommandError,
    UnhandledEventError,
    event_type,
    has_kind,
    is_not_found,
    new_aggregate_id,
)
from .events import History, InMemoryStore, JSONSerializer, Record, Serializer, Store
from .routing import applies_event, handles_command

__all__ = [
    # Repository
    "Repository",
    "RepositorySettings",
    # Domain primitives
    "Aggregate",
    "Command",
    "CommandHandler",
    "Event",
    "event_type",
    "new_aggregate_id",
    # Persistence
    "Record",
    "History",
    "Store",
    "InMemoryStore",
    "Serializer",
    "JSONSerializer",
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
    # Decorators
    "applies_event",
    "handles_command",
]
