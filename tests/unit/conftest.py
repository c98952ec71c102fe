"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from tests.fakes import InMemoryProfileRepository, InMemoryUnitOfWork


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked profile repository."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def calls() -> list[str]:
    """Shared call log for ordering assertions across fakes."""
    return []


@pytest.fixture
def repository(calls: list[str]) -> InMemoryProfileRepository:
    """Stateful in-memory metadata store."""
    return InMemoryProfileRepository(calls)


@pytest.fixture
def memory_uow(repository: InMemoryProfileRepository) -> InMemoryUnitOfWork:
    """Unit of Work over the in-memory metadata store."""
    return InMemoryUnitOfWork(repository)
