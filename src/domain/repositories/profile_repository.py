"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import ProfileRecord


class IProfileRepository(Protocol):
    """Repository interface for ProfileRecord entities (the metadata store)."""

    async def get(self, username: str) -> ProfileRecord | None:
        """Get a profile by username."""
        ...

    async def list_all(self) -> list[ProfileRecord]:
        """Get every stored profile. Order is whatever the store returns."""
        ...

    async def upsert(self, record: ProfileRecord) -> ProfileRecord:
        """Insert the record, or fully overwrite the one with the same username."""
        ...
