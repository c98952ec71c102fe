"""External profile source protocol."""

from typing import Protocol

from domain.entities.profile import SourceProfile


class IProfileSource(Protocol):
    """Read-only access to the external profile-hosting API."""

    async def fetch_profile(self, username: str) -> SourceProfile:
        """
        Fetch profile metadata for a username.

        Raises:
            UpstreamNotFoundError: The source has no such user
            UpstreamError: The source failed or could not be reached
        """
        ...

    async def fetch_avatar(self, url: str) -> bytes:
        """
        Download avatar bytes from a location returned by fetch_profile.

        Raises:
            UpstreamError: The download failed for any reason
        """
        ...
