"""Tests for aggregate routing."""

from decimal import Decimal

import pytest

from chronicle.domain import Aggregate, CommandHandler, Event, Folds, UnhandledCommandError
from chronicle.routing import applied_event_types, applies_event, handles_command
from tests.fixtures.test_app import (
    AccountOpened,
    Audit,
    BankAccount,
    Created,
    DepositMoney,
    Ledger,
    MoneyDeposited,
    MoneyWithdrawn,
    OpenAccount,
)


def test_on_routes_event_and_tracks_version():
    account = BankAccount()
    account.on(AccountOpened(aggregate_id="acc-1", version=1, owner="Alice"))
    account.on(MoneyDeposited(aggregate_id="acc-1", version=2, amount=Decimal("10")))

    assert account.owner == "Alice"
    assert account.balance == Decimal("10")
    assert account.aggregate_id == "acc-1"
    assert account.version == 2


def test_on_raises_for_unrouted_event():
    with pytest.raises(NotImplementedError, match="Created"):
        BankAccount().on(Created(aggregate_id="acc-1", version=1))


def test_handle_returns_events_without_applying_them():
    account = BankAccount()
    events = account.handle(OpenAccount(aggregate_id="acc-1", owner="Alice"))

    assert events == [
        AccountOpened(
            aggregate_id="acc-1", version=1, owner="Alice", occurred_at=events[0].occurred_at
        )
    ]
    assert account.owner == ""
    assert account.version == 0


def test_handle_returning_none_yields_no_events():
    assert BankAccount().handle(Audit(aggregate_id="acc-1")) == []


def test_handle_propagates_business_errors():
    with pytest.raises(ValueError, match="Amount must be positive"):
        BankAccount().handle(DepositMoney(aggregate_id="acc-1", amount=Decimal("-1")))


def test_handle_raises_for_unrouted_command():
    class Unknown(OpenAccount):
        pass

    class Closed(Aggregate):
        pass

    with pytest.raises(UnhandledCommandError, match="Closed"):
        Closed().handle(Unknown(aggregate_id="acc-1", owner="x"))


def test_subclass_handler_overrides_base_handler():
    class StrictAccount(BankAccount):
        @applies_event
        def apply_deposited(self, event: MoneyDeposited) -> None:
            self.balance += event.amount * 2

    account = StrictAccount()
    account.on(MoneyDeposited(aggregate_id="acc-1", version=1, amount=Decimal("5")))

    assert account.balance == Decimal("10")


def test_handler_without_annotation_is_rejected():
    with pytest.raises(ValueError, match="type annotation"):

        class Broken(Aggregate):
            @handles_command
            def handle_anything(self, cmd) -> list[Event]:
                return []


def test_capability_protocols():
    assert isinstance(BankAccount(), CommandHandler)
    assert isinstance(BankAccount(), Folds)
    assert isinstance(Ledger(), Folds)
    assert not isinstance(Ledger(), CommandHandler)


def test_applied_event_types_lists_each_type_once():
    class StrictAccount(BankAccount):
        @applies_event
        def apply_deposited(self, event: MoneyDeposited) -> None:
            self.balance += event.amount * 2

    assert applied_event_types(BankAccount) == [AccountOpened, MoneyDeposited, MoneyWithdrawn]
    assert applied_event_types(StrictAccount) == [AccountOpened, MoneyDeposited, MoneyWithdrawn]
    assert applied_event_types(Aggregate) == []
