"""Gallery service: list every stored profile with fresh avatar URLs."""

import asyncio
from collections.abc import Callable

import structlog

from core.exceptions import PartialListingError
from domain.entities.profile import HydratedProfile, ProfileRecord
from domain.repositories.object_store import IObjectStore
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.ingestion_service import (
    SIGNED_URL_EXPIRY_SECONDS,
    STORAGE_TIMEOUT_SECONDS,
    bounded,
)

logger = structlog.get_logger()

SIGN_CONCURRENCY = 16


class GalleryService:
    """Service layer for the read-only gallery listing."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        object_store: IObjectStore,
        url_expiry_seconds: int = SIGNED_URL_EXPIRY_SECONDS,
        storage_timeout: float = STORAGE_TIMEOUT_SECONDS,
        max_concurrency: int = SIGN_CONCURRENCY,
    ) -> None:
        self._uow_factory = uow_factory
        self._object_store = object_store
        self._url_expiry_seconds = url_expiry_seconds
        self._storage_timeout = storage_timeout
        self._max_concurrency = max_concurrency

    async def list_all(self) -> list[HydratedProfile]:
        """Return every stored profile with a freshly signed avatar URL.

        URLs are signed concurrently and joined with gather, so one slow or
        failing record never blocks or fails the others. Records whose URL
        cannot be signed are left out; the rest keep the store's order.

        Raises:
            StorageError: the metadata scan itself failed
        """
        records = await bounded("profile_scan", self._scan(), self._storage_timeout)
        if not records:
            return []

        semaphore = asyncio.Semaphore(self._max_concurrency)
        results = await asyncio.gather(
            *(self._hydrate(record, semaphore) for record in records)
        )

        profiles: list[HydratedProfile] = []
        skipped = 0
        for result in results:
            if isinstance(result, PartialListingError):
                skipped += 1
                logger.warning(
                    "gallery_record_skipped",
                    username=result.username,
                    error=str(result.cause),
                    error_type=type(result.cause).__name__,
                )
                continue
            profiles.append(result)

        logger.info("gallery_listed", returned=len(profiles), skipped=skipped)
        return profiles

    async def _scan(self) -> list[ProfileRecord]:
        async with self._uow_factory() as uow:
            return await uow.profiles.list_all()

    async def _hydrate(
        self, record: ProfileRecord, semaphore: asyncio.Semaphore
    ) -> HydratedProfile | PartialListingError:
        """Sign one record's URL. Failures are returned, not raised."""
        try:
            async with semaphore:
                async with asyncio.timeout(self._storage_timeout):
                    url = await self._object_store.signed_url(
                        record.avatar_s3_key, self._url_expiry_seconds
                    )
            if not url:
                raise ValueError("object store returned an empty URL")
        except Exception as e:
            return PartialListingError(record.username, e)
        return HydratedProfile(record=record, avatar_url=url)
