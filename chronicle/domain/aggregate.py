from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel

from ..routing import setup_command_routing, setup_event_applying
from .command import Command
from .event import Event

if TYPE_CHECKING:
    from ..routing import MessageRouter


@runtime_checkable
class Folds(Protocol):
    """Anything that can rebuild its state by folding events."""

    def on(self, event: Event) -> None: ...


@runtime_checkable
class CommandHandler(Protocol):
    """Capability of aggregates that accept commands.

    ``handle`` inspects the current state and returns the events the command
    produced, without applying them. Raising rejects the command.
    """

    def handle(self, command: Command) -> Sequence[Event] | None: ...


class Aggregate(BaseModel):
    """Base class for all aggregates in the event sourcing system.

    An aggregate is the current state of one domain entity, derived by
    folding its events in version order starting from a fresh instance.
    The repository never caches aggregates: every load replays history
    into a new instance created by the repository's factory.

    Command and event handling is routed based on method decorators. Use
    @handles_command to mark command handler methods and @applies_event to
    mark event applier methods. The framework routes commands and events to
    the appropriate methods based on their type annotations.

    Examples:
        Create a simple bank account aggregate:

        >>> from decimal import Decimal
        >>> from chronicle.routing import handles_command, applies_event
        >>>
        >>> class DepositMoney(Command):
        ...     amount: Decimal
        >>>
        >>> class MoneyDeposited(Event):
        ...     amount: Decimal
        >>>
        >>> class BankAccount(Aggregate):
        ...     balance: Decimal = Decimal("0.00")
        ...
        ...     @handles_command
        ...     def handle_deposit(self, cmd: DepositMoney) -> list[Event]:
        ...         if cmd.amount <= 0:
        ...             raise ValueError("Amount must be positive")
        ...         return [
        ...             MoneyDeposited(
        ...                 aggregate_id=cmd.aggregate_id,
        ...                 version=self.version + 1,
        ...                 amount=cmd.amount,
        ...             )
        ...         ]
        ...
        ...     @applies_event
        ...     def apply_deposited(self, evt: MoneyDeposited) -> None:
        ...         self.balance += evt.amount

    Attributes:
        aggregate_id: ID of the aggregate, taken from the folded events.
            Empty until the first event has been applied.
        version: Version of the last folded event, 0 for a fresh instance.
    """

    aggregate_id: str = ""
    version: int = 0

    # Class-level routing tables
    _command_router: ClassVar["MessageRouter"]
    _event_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Set up command and event routing when a subclass is defined."""
        super().__init_subclass__(**kwargs)  # type: ignore[arg-type]
        cls._command_router = setup_command_routing(cls)
        cls._event_router = setup_event_applying(cls)

    def on(self, event: Event) -> None:
        """Fold one event into the aggregate state.

        Routes the event to its @applies_event method, then records the
        event's aggregate id and version.

        Raises:
            NotImplementedError: If no applier is registered for the event type.
        """
        self._event_router.route(self, event)
        self.aggregate_id = event.aggregate_id
        self.version = event.version

    def handle(self, command: Command) -> list[Event]:
        """Route a command to its registered handler.

        Returns:
            The events produced by the handler, in order.

        Raises:
            UnhandledCommandError: If no handler is registered for this command type.
        """
        events = self._command_router.route(self, command)
        return list(events or [])  # type: ignore[call-overload]

    def replay_events(self, events: Sequence[Event]) -> None:
        """Fold a sequence of events in order."""
        for event in events:
            self.on(event)
