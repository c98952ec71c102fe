"""GitHub users API client.

Implements IProfileSource over the public REST endpoint:

    GET {api_url}/users/{username}
    {
        "login": "octocat",
        "name": "The Octocat",
        "bio": null,
        "public_repos": 8,
        "followers": 4000,
        "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
        "created_at": "2011-01-25T18:44:36Z"
    }
"""

from typing import Any

import httpx
import structlog

from core.exceptions import UpstreamError, UpstreamNotFoundError
from domain.entities.profile import SourceProfile

logger = structlog.get_logger()

GITHUB_API_URL = "https://api.github.com"
USER_AGENT = "profile-gallery"


class GitHubProfileSource:
    """httpx-based implementation of IProfileSource.

    Owns a single AsyncClient; call ``aclose()`` on shutdown.
    """

    def __init__(
        self,
        api_url: str = GITHUB_API_URL,
        token: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._api_url = api_url.rstrip("/")
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def fetch_profile(self, username: str) -> SourceProfile:
        """Fetch a user's profile, translating non-2xx into typed errors."""
        url = f"{self._api_url}/users/{username}"
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise UpstreamError("GitHub API timed out", status_code=504) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"GitHub API unreachable: {e}", status_code=502) from e

        if response.status_code == 404:
            raise UpstreamNotFoundError(username)
        if response.is_error:
            logger.warning(
                "github_api_error",
                username=username,
                status_code=response.status_code,
            )
            raise UpstreamError(
                "GitHub user not found or API error",
                status_code=response.status_code,
                details={"username": username},
            )

        try:
            return self._to_source_profile(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamError("Malformed GitHub API response", status_code=502) from e

    async def fetch_avatar(self, url: str) -> bytes:
        """Download avatar bytes. Every failure is a 502 UpstreamError."""
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise UpstreamError("Avatar download timed out", status_code=504) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Avatar download failed: {e}", status_code=502) from e

        if response.is_error:
            raise UpstreamError(
                "Avatar download failed",
                status_code=502,
                details={"upstream_status": response.status_code},
            )
        if not response.content:
            raise UpstreamError("Avatar download returned no data", status_code=502)
        return response.content

    @staticmethod
    def _to_source_profile(data: dict[str, Any]) -> SourceProfile:
        """Convert the JSON payload to a SourceProfile."""
        return SourceProfile(
            login=data["login"],
            avatar_url=data["avatar_url"],
            name=data.get("name"),
            bio=data.get("bio"),
            public_repos=int(data.get("public_repos") or 0),
            followers=int(data.get("followers") or 0),
            created_at=data.get("created_at"),
        )
