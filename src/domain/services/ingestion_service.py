"""Ingestion service: pull one profile from GitHub into the directory."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from core.exceptions import InvalidUsernameError, StorageError
from domain.entities.profile import (
    AVATAR_KEY_EXTENSION,
    AVATAR_KEY_PREFIX,
    HydratedProfile,
    ProfileRecord,
    avatar_storage_key,
    is_valid_username,
)
from domain.repositories.object_store import IObjectStore
from domain.repositories.profile_source import IProfileSource
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

T = TypeVar("T")

AVATAR_CONTENT_TYPE = "image/jpeg"
SIGNED_URL_EXPIRY_SECONDS = 3600
STORAGE_TIMEOUT_SECONDS = 10.0


async def bounded(operation: str, aw: Awaitable[T], timeout: float) -> T:
    """Await a storage call, converting a timeout into StorageError."""
    try:
        async with asyncio.timeout(timeout):
            return await aw
    except TimeoutError as e:
        raise StorageError(operation, "Storage operation timed out") from e


class IngestionService:
    """Service layer for the single-profile ingest workflow.

    Steps run strictly in order: source fetch, avatar download, avatar
    write, metadata upsert, URL signing. The avatar bytes are always
    durable before the metadata record that points at them.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        source: IProfileSource,
        object_store: IObjectStore,
        key_prefix: str = AVATAR_KEY_PREFIX,
        key_extension: str = AVATAR_KEY_EXTENSION,
        content_type: str = AVATAR_CONTENT_TYPE,
        url_expiry_seconds: int = SIGNED_URL_EXPIRY_SECONDS,
        storage_timeout: float = STORAGE_TIMEOUT_SECONDS,
    ) -> None:
        self._uow_factory = uow_factory
        self._source = source
        self._object_store = object_store
        self._key_prefix = key_prefix
        self._key_extension = key_extension
        self._content_type = content_type
        self._url_expiry_seconds = url_expiry_seconds
        self._storage_timeout = storage_timeout

    def storage_key(self, username: str) -> str:
        """Deterministic avatar key for a username."""
        return avatar_storage_key(username, self._key_prefix, self._key_extension)

    async def ingest(self, username: str) -> HydratedProfile:
        """Fetch, store and index a GitHub profile, then return it hydrated.

        Args:
            username: GitHub login to ingest

        Returns:
            The stored record plus a signed avatar URL

        Raises:
            InvalidUsernameError: username is not a valid GitHub login
            UpstreamNotFoundError: GitHub has no such user (status preserved)
            UpstreamError: GitHub or the avatar host failed
            StorageError: the avatar write or metadata upsert failed
        """
        if not is_valid_username(username):
            raise InvalidUsernameError(username)

        # Upstream errors propagate unchanged so their status survives to the caller.
        source = await self._source.fetch_profile(username)
        avatar = await self._source.fetch_avatar(source.avatar_url)

        key = self.storage_key(source.login)
        await bounded(
            "avatar_put",
            self._object_store.put(key, avatar, self._content_type),
            self._storage_timeout,
        )

        record = ProfileRecord.from_source(source, avatar_s3_key=key)
        try:
            await bounded("profile_upsert", self._upsert(record), self._storage_timeout)
        except StorageError:
            # No rollback: the next ingest for this login overwrites the same key.
            logger.warning("avatar_orphaned", username=record.username, key=key)
            raise

        avatar_url = await bounded(
            "avatar_sign",
            self._object_store.signed_url(key, self._url_expiry_seconds),
            self._storage_timeout,
        )

        logger.info(
            "profile_ingested",
            username=record.username,
            key=key,
            avatar_bytes=len(avatar),
        )
        return HydratedProfile(record=record, avatar_url=avatar_url)

    async def _upsert(self, record: ProfileRecord) -> ProfileRecord:
        async with self._uow_factory() as uow:
            stored = await uow.profiles.upsert(record)
            await uow.commit()
            return stored
