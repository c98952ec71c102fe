"""Profile domain entities."""

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

# GitHub login grammar: alphanumerics and hyphens, no leading hyphen, max 39 chars.
# Repeated and trailing hyphens exist on legacy accounts and stay accepted.
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,38})$")

AVATAR_KEY_PREFIX = "avatars/"
AVATAR_KEY_EXTENSION = ".jpg"


def is_valid_username(username: str) -> bool:
    """Check a username against GitHub's login rules."""
    return bool(USERNAME_PATTERN.match(username))


def avatar_storage_key(
    username: str,
    prefix: str = AVATAR_KEY_PREFIX,
    extension: str = AVATAR_KEY_EXTENSION,
) -> str:
    """Derive the object-store key for a user's avatar.

    Case is preserved; callers pass the canonical login returned by GitHub,
    which is unique case-insensitively, so keys never collide.
    """
    return f"{prefix}{username}{extension}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class SourceProfile:
    """Profile data as returned by the external profile source."""

    login: str
    avatar_url: str
    name: str | None = None
    bio: str | None = None
    public_repos: int = 0
    followers: int = 0
    created_at: str | None = None


@dataclass
class ProfileRecord:
    """Domain entity for a stored developer profile."""

    username: str
    avatar_s3_key: str
    name: str | None = None
    bio: str | None = None
    public_repos: int = 0
    followers: int = 0
    github_created_at: str | None = None
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        """Clamp counters; the source never reports negatives but the store is not trusted."""
        self.public_repos = max(self.public_repos, 0)
        self.followers = max(self.followers, 0)

    @classmethod
    def from_source(cls, source: SourceProfile, avatar_s3_key: str) -> "ProfileRecord":
        """Build a fresh record from upstream data. ``created_at`` is set to now."""
        return cls(
            username=source.login,
            name=source.name,
            bio=source.bio,
            public_repos=source.public_repos,
            followers=source.followers,
            avatar_s3_key=avatar_s3_key,
            github_created_at=source.created_at,
        )


@dataclass(frozen=True, slots=True)
class HydratedProfile:
    """Read-only value object: a ProfileRecord plus a freshly signed avatar URL."""

    record: ProfileRecord
    avatar_url: str

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the wire shape."""
        data = asdict(self.record)
        data["avatar_url"] = self.avatar_url
        return data
