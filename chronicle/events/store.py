"""Store interfaces and the in-memory reference implementation."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..domain.exceptions import (
    AggregateNotFoundError,
    ConcurrencyError,
    InvalidArgumentError,
)


@dataclass(frozen=True)
class Record:
    """The persisted form of one event.

    Attributes:
        version: Version of the serialized event, mirrored so stores can order
            records without decoding them.
        data: The event in serialized form.
    """

    version: int
    data: bytes


History = list[Record]
"""Records of one aggregate in ascending version order."""


class Store(ABC):
    """Abstract interface for durable record persistence.

    Store is the foundation of the repository: each aggregate's records form
    an append-only history that is replayed to reconstruct its state.

    Key responsibilities:
    - **Ordering**: Histories are kept and returned in ascending version order
    - **Concurrency Control**: Appends must carry versions strictly greater
      than the highest version already stored for the aggregate
    - **Atomicity**: A batch is either appended in full or not at all
    """

    @abstractmethod
    async def save(self, aggregate_id: str, *records: Record) -> None:
        """Append records to an aggregate's history.

        Args:
            aggregate_id: The aggregate the records belong to.
            *records: Serialized events to append.

        Raises:
            ConcurrencyError: If any record's version is not strictly greater
                than the current maximum version stored for the aggregate.
            InvalidArgumentError: If ``aggregate_id`` is blank.
        """
        ...

    @abstractmethod
    async def load(
        self,
        aggregate_id: str,
        from_version: int = 0,
        to_version: int = 0,
    ) -> History:
        """Load a slice of an aggregate's history.

        Args:
            aggregate_id: The aggregate whose records should be loaded.
            from_version: Minimum version to load (inclusive).
            to_version: Maximum version to load (inclusive). 0 loads
                everything from ``from_version`` onwards.

        Returns:
            Matching records in ascending version order. An existing aggregate
            with no records in range yields an empty list.

        Raises:
            AggregateNotFoundError: If the aggregate has no stored history.
        """
        ...


def in_range(record: Record, from_version: int, to_version: int) -> bool:
    """Check whether a record falls inside a ``Store.load`` range."""
    return record.version >= from_version and (to_version == 0 or record.version <= to_version)


class InMemoryStore(Store):
    """Dictionary-based in-memory store for testing.

    Stores records in a dictionary keyed by aggregate ID. Every save and load
    runs under a single lock, so the "check current version, then append"
    sequence in ``save`` cannot interleave with another writer.

    This implementation is suitable for:
    - Unit tests (fast, no external dependencies)
    - Development and experimentation

    **NOT suitable for production**: data is lost on restart and memory
    usage grows unbounded.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self.by_aggregate_id: dict[str, History] = {}
        self._lock = asyncio.Lock()

    async def save(self, aggregate_id: str, *records: Record) -> None:
        """Append records after checking their versions.

        The batch is validated as a whole before anything is appended.
        Saving no records is a no-op and does not create the aggregate.
        """
        if not aggregate_id:
            raise InvalidArgumentError("aggregate id may not be blank")
        if not records:
            return

        batch = sorted(records, key=lambda r: r.version)

        async with self._lock:
            history = self.by_aggregate_id.get(aggregate_id, [])
            current_version = history[-1].version if history else 0

            previous = current_version
            for record in batch:
                if record.version <= previous:
                    raise ConcurrencyError(
                        f"version {record.version} conflicts with version {previous} "
                        f"of aggregate {aggregate_id}"
                    )
                previous = record.version

            self.by_aggregate_id[aggregate_id] = history + batch

    async def load(
        self,
        aggregate_id: str,
        from_version: int = 0,
        to_version: int = 0,
    ) -> History:
        async with self._lock:
            history = self.by_aggregate_id.get(aggregate_id)
            if history is None:
                raise AggregateNotFoundError(f"no aggregate found with id, {aggregate_id}")

            return [record for record in history if in_range(record, from_version, to_version)]
