"""Object store protocol."""

from typing import Protocol


class IObjectStore(Protocol):
    """Binary blob storage keyed by string path."""

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store bytes under key, overwriting anything already there."""
        ...

    async def get(self, key: str) -> bytes:
        """Read the bytes stored under key."""
        ...

    async def signed_url(self, key: str, expires_in: int) -> str:
        """
        Issue a time-scoped read URL for key.

        Args:
            key: The object key
            expires_in: Lifetime of the URL in seconds

        Returns:
            A URL granting temporary read access without store credentials
        """
        ...
