"""SQLAlchemy ORM models."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """Developer profile ingested from GitHub."""

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("public_repos >= 0", name="ck_profiles_public_repos_nonneg"),
        CheckConstraint("followers >= 0", name="ck_profiles_followers_nonneg"),
    )

    username: Mapped[str] = mapped_column(String(39), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255))
    bio: Mapped[str | None] = mapped_column(Text)
    public_repos: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    followers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    avatar_s3_key: Mapped[str] = mapped_column(String(255), nullable=False)
    # Verbatim upstream timestamp string
    github_created_at: Mapped[str | None] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
