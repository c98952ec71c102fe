"""SQLAlchemy implementation of Profile repository."""

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import StorageError
from domain.entities.profile import ProfileRecord
from infrastructure.database.models import ProfileModel

# Dialects with a native INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

UPSERT_COLUMNS = (
    "name",
    "bio",
    "public_repos",
    "followers",
    "avatar_s3_key",
    "github_created_at",
    "created_at",
)


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, username: str) -> ProfileRecord | None:
        """Get a profile by username."""
        try:
            model = await self._session.get(ProfileModel, username)
        except SQLAlchemyError as e:
            raise StorageError("profile_get", "Failed to read profile") from e
        return self._to_entity(model) if model else None

    async def list_all(self) -> list[ProfileRecord]:
        """Get all profiles, in whatever order the database returns them."""
        try:
            result = await self._session.execute(select(ProfileModel))
        except SQLAlchemyError as e:
            raise StorageError("profile_scan", "Failed to list profiles") from e
        return [self._to_entity(model) for model in result.scalars()]

    async def upsert(self, record: ProfileRecord) -> ProfileRecord:
        """Insert or fully overwrite the row keyed by username.

        Runs as a single INSERT ... ON CONFLICT DO UPDATE so concurrent
        first-time writes of one username both succeed and the later one wins.
        """
        dialect = self._session.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise StorageError("profile_upsert", f"Upsert not supported on {dialect}")

        model = self._to_model(record)
        stmt = insert(ProfileModel).values(
            username=model.username,
            **{column: getattr(model, column) for column in UPSERT_COLUMNS},
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ProfileModel.username],
            set_={column: stmt.excluded[column] for column in UPSERT_COLUMNS},
        )
        try:
            await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError("profile_upsert", "Failed to save profile") from e
        return record

    def _to_entity(self, model: ProfileModel) -> ProfileRecord:
        """Convert ORM model to domain entity."""
        return ProfileRecord(
            username=model.username,
            name=model.name,
            bio=model.bio,
            public_repos=model.public_repos,
            followers=model.followers,
            avatar_s3_key=model.avatar_s3_key,
            github_created_at=model.github_created_at,
            created_at=model.created_at,
        )

    def _to_model(self, entity: ProfileRecord) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            username=entity.username,
            name=entity.name,
            bio=entity.bio,
            public_repos=entity.public_repos,
            followers=entity.followers,
            avatar_s3_key=entity.avatar_s3_key,
            github_created_at=entity.github_created_at,
            created_at=entity.created_at,
        )
