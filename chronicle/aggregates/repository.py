import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Generic, TypeVar

from ..config import RepositorySettings
from ..domain import (
    AggregateNotFoundError,
    AggregateNotSavedError,
    Command,
    CommandHandler,
    Event,
    EventSourcingError,
    Folds,
    InvalidArgumentError,
    UnhandledEventError,
    as_utc,
    event_type,
    is_not_found,
)
from ..events import Serializer, Store
from .delivery import IsolatedDelivery, Observer, ObserverDelivery, SynchronousDelivery

LOGGER = logging.getLogger(__name__)

A = TypeVar("A", bound=Folds)


class Repository(Generic[A]):
    """Loads aggregates by replaying their history and applies commands to them.

    The repository is bound to one aggregate factory, one store and one
    serializer. It keeps no per-aggregate state: every call creates a fresh
    aggregate from the factory and replays the stored records into it.

    ``apply`` runs the full write cycle for a command:

    1. **Load**: Replay the aggregate, or start from a fresh one at version 0
       if it has no history
    2. **Handle**: Ask the aggregate which events the command produces
    3. **Persist**: Serialize the events and save them in one store call
    4. **Publish**: Deliver the events to observers

    Any failure before step 3 leaves the store untouched. The store rejects
    versions that are not above what it already holds, so of two concurrent
    ``apply`` calls on the same aggregate only one can commit; the other
    raises ``ConcurrencyError`` and retrying is up to the caller.

    Examples:
        >>> repository = Repository(
        ...     BankAccount,
        ...     InMemoryStore(),
        ...     JSONSerializer(AccountOpened, MoneyDeposited),
        ...     observers=[print],
        ... )
        >>> version = await repository.apply(OpenAccount(aggregate_id="acc-1", owner="Alice"))
        >>> account = await repository.load("acc-1")
    """

    __slots__ = ("aggregate_factory", "_store", "_serializer", "delivery", "settings")

    def __init__(
        self,
        aggregate_factory: Callable[[], A],
        store: Store,
        serializer: Serializer,
        observers: Sequence[Observer] = (),
        settings: RepositorySettings | None = None,
    ):
        """Initialize the repository.

        Args:
            aggregate_factory: Zero-argument callable returning a fresh
                aggregate, e.g. the aggregate class itself.
            store: Where records are saved and loaded.
            serializer: Converts events to and from records. Every event type
                the aggregate folds must be bound to it.
            observers: Callables notified of each event after a successful
                ``apply``. Observers should be short lived, as the caller
                waits for them.
            settings: Repository settings; read from the environment if omitted.
        """
        self.aggregate_factory = aggregate_factory
        self._store = store
        self._serializer = serializer
        self.settings = settings if settings is not None else RepositorySettings()

        delivery: type[ObserverDelivery] = (
            IsolatedDelivery if self.settings.isolate_observers else SynchronousDelivery
        )
        self.delivery = delivery(observers)

    @property
    def store(self) -> Store:
        """The underlying store."""
        return self._store

    @property
    def serializer(self) -> Serializer:
        """The underlying serializer."""
        return self._serializer

    def new(self) -> A:
        """Create a fresh aggregate instance."""
        return self.aggregate_factory()

    async def save(self, *events: Event) -> None:
        """Serialize events and persist them in a single store call.

        Args:
            *events: Events of a single aggregate, in the order to store them.

        Raises:
            InvalidArgumentError: If the events belong to different aggregates.
            InvalidEncodingError: If an event cannot be serialized.
            ConcurrencyError: If the store rejects the versions.
            AggregateNotSavedError: If the store failed for any other reason.
        """
        if not events:
            return

        aggregate_id = events[0].aggregate_id
        if others := sorted({e.aggregate_id for e in events} - {aggregate_id}):
            raise InvalidArgumentError(
                f"events to save must share one aggregate id, got {aggregate_id} and "
                + ", ".join(others)
            )

        history = [self._serializer.marshal_event(event) for event in events]

        try:
            await self._store.save(aggregate_id, *history)
        except EventSourcingError:
            raise
        except Exception as e:
            raise AggregateNotSavedError(
                f"unable to save {len(history)} event(s) for aggregate id, {aggregate_id}",
                cause=e,
            ) from e

        LOGGER.debug(
            "Saved %d event(s) for aggregate id, %s",
            len(history),
            aggregate_id,
            extra={"aggregate_id": aggregate_id, "event_count": len(history)},
        )

    async def load(self, aggregate_id: str) -> A:
        """Rebuild the latest state of an aggregate.

        Raises:
            AggregateNotFoundError: If the aggregate has no history.
            UnhandledEventError: If the aggregate fails to fold an event.
        """
        aggregate, _ = await self._replay(aggregate_id)
        return aggregate

    async def load_version(self, aggregate_id: str, version: int) -> A:
        """Rebuild the state of an aggregate as of a version.

        Only events with a version up to ``version`` are folded; 0 means
        no bound, yielding the latest state.

        Raises:
            InvalidArgumentError: If ``version`` is negative.
            AggregateNotFoundError: If no event has a version up to ``version``.
        """
        if version < 0:
            raise InvalidArgumentError(
                f"version provided to Repository.load_version may not be negative, got {version}"
            )
        aggregate, _ = await self._replay(aggregate_id, to_version=version)
        return aggregate

    async def load_time(self, aggregate_id: str, cutoff: datetime) -> A:
        """Rebuild the state of an aggregate as of a point in time.

        Events are folded in version order until the first one that occurred
        after ``cutoff``. This assumes ``occurred_at`` never decreases as
        versions increase; histories that break that assumption are truncated
        at the first later event regardless of what follows it.

        A naive ``cutoff`` is read as UTC, the same way naive ``occurred_at``
        values are.
        """
        aggregate, _ = await self._replay(aggregate_id, cutoff=as_utc(cutoff))
        return aggregate

    async def _replay(
        self,
        aggregate_id: str,
        to_version: int = 0,
        cutoff: datetime | None = None,
    ) -> tuple[A, int]:
        history = await self._store.load(aggregate_id, 0, to_version)

        aggregate = self.new()
        if not history:
            raise AggregateNotFoundError(
                f"unable to load {type(aggregate).__name__}, {aggregate_id}"
            )

        version = 0
        folded = 0
        for record in history:
            event = self._serializer.unmarshal_event(record)
            if cutoff is not None and event.occurred_at > cutoff:
                break

            try:
                aggregate.on(event)
            except Exception as e:
                raise UnhandledEventError(
                    f"aggregate was unable to handle event, {event_type(event)}", cause=e
                ) from e

            version = event.version
            folded += 1

        LOGGER.log(
            self.settings.level,
            "Loaded %d event(s) for aggregate id, %s at version %d",
            folded,
            aggregate_id,
            version,
            extra={"aggregate_id": aggregate_id, "event_count": folded, "version": version},
        )

        return aggregate, version

    async def apply(self, command: Command) -> int:
        """Handle a command and persist the events it produces.

        Args:
            command: The command to apply.

        Returns:
            The aggregate's version after the command: the version of the
            last produced event, or the version it already had if the command
            produced no events.

        Raises:
            InvalidArgumentError: If the command is missing, has a blank
                aggregate id, or the aggregate does not handle commands.
            ConcurrencyError: If another writer saved the same versions first.
            Exception: Whatever the command handler or an observer raised.
        """
        if command is None:
            raise InvalidArgumentError("command provided to Repository.apply may not be None")
        aggregate_id = getattr(command, "aggregate_id", "")
        if not aggregate_id:
            raise InvalidArgumentError(
                "command provided to Repository.apply may not contain a blank aggregate id"
            )

        try:
            aggregate, version = await self._replay(aggregate_id)
        except EventSourcingError as e:
            if not is_not_found(e):
                raise
            aggregate, version = self.new(), 0

        if not isinstance(aggregate, CommandHandler):
            raise InvalidArgumentError(
                f"aggregate {type(aggregate).__name__} does not implement CommandHandler"
            )

        events = list(aggregate.handle(command) or [])
        await self.save(*events)

        if events:
            version = events[-1].version

        await self.delivery.deliver(events)

        return version
