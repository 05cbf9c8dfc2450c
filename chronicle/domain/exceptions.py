"""Exceptions raised by the event sourcing core.

Every error originated by the core carries an ``ErrorKind`` and an optional
cause. Helpers walk the cause chain so callers can ask whether a kind appears
anywhere in it, not only on the outermost error.
"""

from enum import Enum
from typing import Any, ClassVar


class ErrorKind(str, Enum):
    """Classification of errors raised by the core."""

    INVALID_ARGUMENT = "invalid argument"
    INVALID_ENCODING = "invalid encoding"
    UNBOUND_EVENT_TYPE = "unbound event type"
    AGGREGATE_NOT_FOUND = "aggregate not found"
    AGGREGATE_NOT_SAVED = "aggregate not saved"
    UNHANDLED_COMMAND = "unhandled command"
    UNHANDLED_EVENT = "unhandled event"
    CONFLICT = "conflict"


class EventSourcingError(Exception):
    """Base class for all coded errors.

    Attributes:
        kind: The classification of the error.
        message: Human readable details.
        cause: The underlying error, if any.

    Examples:
        >>> err = EventSourcingError("hello world", cause=EOFError("EOF"))
        >>> str(err)
        'hello world: EOF'
    """

    kind: ClassVar[ErrorKind | None] = None

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, cause={self.cause!r})"


class InvalidArgumentError(EventSourcingError):
    """Raised when the caller passed an incorrect value."""

    kind = ErrorKind.INVALID_ARGUMENT


class InvalidEncodingError(EventSourcingError):
    """Raised when a serializer cannot encode or decode an event."""

    kind = ErrorKind.INVALID_ENCODING


class UnboundEventTypeError(EventSourcingError):
    """Raised when a record names a type tag that was never bound."""

    kind = ErrorKind.UNBOUND_EVENT_TYPE


class AggregateNotFoundError(EventSourcingError):
    """Raised when loading an aggregate id with no stored history."""

    kind = ErrorKind.AGGREGATE_NOT_FOUND


class AggregateNotSavedError(EventSourcingError):
    """Raised when the store failed to persist records for an aggregate."""

    kind = ErrorKind.AGGREGATE_NOT_SAVED


class UnhandledCommandError(EventSourcingError):
    """Raised when an aggregate has no handler for a command."""

    kind = ErrorKind.UNHANDLED_COMMAND


class UnhandledEventError(EventSourcingError):
    """Raised when an aggregate fails to fold an event during replay."""

    kind = ErrorKind.UNHANDLED_EVENT


class ConcurrencyError(EventSourcingError):
    """Raised when a version conflict is detected on save.

    This indicates that another writer appended events to the aggregate
    between when it was loaded and when changes were saved. Retrying is the
    caller's responsibility.
    """

    kind = ErrorKind.CONFLICT


_ERRORS_BY_KIND: dict[ErrorKind, type[EventSourcingError]] = {
    cls.kind: cls
    for cls in (
        InvalidArgumentError,
        InvalidEncodingError,
        UnboundEventTypeError,
        AggregateNotFoundError,
        AggregateNotSavedError,
        UnhandledCommandError,
        UnhandledEventError,
        ConcurrencyError,
    )
    if cls.kind is not None
}


def new_error(
    cause: BaseException | None, kind: ErrorKind, message: str, *args: Any
) -> EventSourcingError:
    """Build the error class registered for ``kind``.

    Args:
        cause: The underlying error, or None.
        kind: The classification of the error.
        message: A %-style format string for the message.
        *args: Arguments interpolated into ``message``.

    Returns:
        An instance of the subclass matching ``kind``.

    Examples:
        >>> err = new_error(None, ErrorKind.AGGREGATE_NOT_FOUND, "no aggregate, %s", "abc")
        >>> type(err).__name__, str(err)
        ('AggregateNotFoundError', 'no aggregate, abc')
    """
    if args:
        message = message % args
    return _ERRORS_BY_KIND[ErrorKind(kind)](message, cause=cause)


def _causes(err: BaseException | None):
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        cause = err.cause if isinstance(err, EventSourcingError) else None
        err = cause if cause is not None else err.__cause__


def has_kind(err: BaseException | None, kind: ErrorKind) -> bool:
    """Check whether ``err`` or any error in its cause chain carries ``kind``."""
    return any(
        isinstance(e, EventSourcingError) and e.kind == kind for e in _causes(err)
    )


def is_not_found(err: BaseException | None) -> bool:
    """Check whether the error chain reports a missing aggregate."""
    return has_kind(err, ErrorKind.AGGREGATE_NOT_FOUND)
