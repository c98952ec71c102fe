"""Pydantic schemas for Profile API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from domain.entities.profile import HydratedProfile


class ProfileResponse(BaseModel):
    """A stored profile with a freshly signed avatar URL."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "octocat",
                "name": "The Octocat",
                "bio": None,
                "public_repos": 8,
                "followers": 4000,
                "avatar_url": "https://profile-avatars.s3.amazonaws.com/avatars/octocat.jpg?X-Amz-Signature=...",
                "created_at": "2026-01-28T10:00:00Z",
                "github_created_at": "2011-01-25T18:44:36Z",
                "avatar_s3_key": "avatars/octocat.jpg",
            }
        },
    )

    username: str
    name: str | None = None
    bio: str | None = None
    public_repos: int
    followers: int
    avatar_url: str
    created_at: datetime
    github_created_at: str | None = None
    avatar_s3_key: str

    @classmethod
    def from_hydrated(cls, profile: HydratedProfile) -> "ProfileResponse":
        return cls(**profile.to_dict())
