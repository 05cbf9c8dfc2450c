"""Central test fixtures - imports from unified test_app."""

import pytest

from chronicle.aggregates import Repository
from chronicle.config import RepositorySettings
from chronicle.domain import new_aggregate_id
from chronicle.events import InMemoryStore, JSONSerializer
from tests.fixtures.test_app import ALL_EVENTS, BankAccount, Entity


@pytest.fixture
def aggregate_id() -> str:
    """Generate a unique aggregate ID."""
    return new_aggregate_id()


@pytest.fixture
def settings() -> RepositorySettings:
    """Settings independent of the environment."""
    return RepositorySettings(log_level="INFO", isolate_observers=False)


@pytest.fixture
def store() -> InMemoryStore:
    """Create an in-memory store."""
    return InMemoryStore()


@pytest.fixture
def serializer() -> JSONSerializer:
    """Create a JSON serializer bound to every test event."""
    return JSONSerializer(*ALL_EVENTS)


@pytest.fixture
def bank_account_repository(store, serializer, settings) -> Repository[BankAccount]:
    """Create a repository for BankAccount aggregates."""
    return Repository(BankAccount, store, serializer, settings=settings)


@pytest.fixture
def entity_repository(store, serializer, settings) -> Repository[Entity]:
    """Create a repository for Entity aggregates."""
    return Repository(Entity, store, serializer, settings=settings)
