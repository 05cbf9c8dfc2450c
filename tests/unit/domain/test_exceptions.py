"""Tests for coded errors and cause-chain helpers."""

import pytest

from chronicle.domain.exceptions import (
    AggregateNotFoundError,
    ConcurrencyError,
    ErrorKind,
    EventSourcingError,
    InvalidArgumentError,
    UnboundEventTypeError,
    UnhandledEventError,
    has_kind,
    is_not_found,
    new_error,
)


def test_new_error_formats_message_and_keeps_cause():
    cause = EOFError("EOF")
    err = new_error(cause, ErrorKind.INVALID_ENCODING, "hello %s", "world")

    assert err.kind is ErrorKind.INVALID_ENCODING
    assert err.cause is cause
    assert err.message == "hello world"
    assert str(err) == "hello world: EOF"


def test_new_error_returns_subclass_for_kind():
    assert isinstance(new_error(None, ErrorKind.CONFLICT, "x"), ConcurrencyError)
    assert isinstance(new_error(None, "aggregate not found", "x"), AggregateNotFoundError)


def test_str_without_cause_is_message():
    assert str(InvalidArgumentError("bad value")) == "bad value"


def test_error_kind_values_are_phrases():
    assert ErrorKind.UNHANDLED_COMMAND.value == "unhandled command"
    assert ErrorKind.AGGREGATE_NOT_SAVED == "aggregate not saved"


@pytest.mark.parametrize(
    "err, expected",
    [
        (None, False),
        (AggregateNotFoundError("not found"), True),
        (UnboundEventTypeError("outer", cause=AggregateNotFoundError("not found")), True),
        (ValueError("plain"), False),
        (InvalidArgumentError("outer", cause=ValueError("plain")), False),
    ],
)
def test_is_not_found(err, expected):
    assert is_not_found(err) is expected


def test_has_kind_walks_nested_causes():
    err = UnhandledEventError(
        "outer", cause=InvalidArgumentError("middle", cause=ConcurrencyError("inner"))
    )

    assert has_kind(err, ErrorKind.UNHANDLED_EVENT)
    assert has_kind(err, ErrorKind.CONFLICT)
    assert not has_kind(err, ErrorKind.INVALID_ENCODING)


def test_has_kind_follows_raise_from():
    try:
        try:
            raise AggregateNotFoundError("missing")
        except AggregateNotFoundError as e:
            raise RuntimeError("wrapped") from e
    except RuntimeError as err:
        assert is_not_found(err)


def test_has_kind_handles_cycles():
    a = EventSourcingError("a")
    b = EventSourcingError("b", cause=a)
    a.cause = b

    assert not has_kind(a, ErrorKind.CONFLICT)
