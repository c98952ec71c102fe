"""Unit tests for GalleryService."""

import asyncio

import pytest

from core.exceptions import StorageError
from domain.entities.profile import ProfileRecord, avatar_storage_key
from domain.services.gallery_service import GalleryService
from tests.fakes import InMemoryObjectStore, InMemoryProfileRepository, InMemoryUnitOfWork
from tests.unit.conftest import FakeUnitOfWork


def _record(username: str) -> ProfileRecord:
    return ProfileRecord(username=username, avatar_s3_key=avatar_storage_key(username))


@pytest.fixture
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def service(memory_uow: InMemoryUnitOfWork, store: InMemoryObjectStore) -> GalleryService:
    return GalleryService(lambda: memory_uow, object_store=store)


def _seed(repository: InMemoryProfileRepository, *usernames: str) -> None:
    for username in usernames:
        repository.rows[username] = _record(username)


class TestListAll:
    @pytest.mark.asyncio
    async def test_empty_store(self, service: GalleryService):
        assert await service.list_all() == []

    @pytest.mark.asyncio
    async def test_returns_every_record_with_url(
        self, service: GalleryService, repository: InMemoryProfileRepository
    ):
        _seed(repository, "alice", "bob", "carol")

        result = await service.list_all()

        assert [p.record.username for p in result] == ["alice", "bob", "carol"]
        for profile in result:
            assert profile.avatar_url
            assert profile.record.avatar_s3_key in profile.avatar_url

    @pytest.mark.asyncio
    async def test_preserves_store_order(
        self, service: GalleryService, repository: InMemoryProfileRepository
    ):
        _seed(repository, "zed", "amy", "mo")

        result = await service.list_all()

        assert [p.record.username for p in result] == ["zed", "amy", "mo"]

    @pytest.mark.asyncio
    async def test_uses_configured_expiry(
        self, memory_uow: InMemoryUnitOfWork, store: InMemoryObjectStore,
        repository: InMemoryProfileRepository,
    ):
        _seed(repository, "alice")
        service = GalleryService(lambda: memory_uow, object_store=store, url_expiry_seconds=120)

        result = await service.list_all()

        assert "X-Amz-Expires=120" in result[0].avatar_url

    @pytest.mark.asyncio
    async def test_signs_urls_concurrently(
        self, memory_uow: InMemoryUnitOfWork, repository: InMemoryProfileRepository
    ):
        _seed(repository, "a", "b", "c", "d")
        started = 0
        all_started = asyncio.Event()

        class BarrierStore(InMemoryObjectStore):
            async def signed_url(self, key: str, expires_in: int) -> str:
                nonlocal started
                started += 1
                if started == 4:
                    all_started.set()
                # Completes only if every signing call is in flight at once
                await all_started.wait()
                return f"https://signed/{key}"

        service = GalleryService(
            lambda: memory_uow, object_store=BarrierStore(), storage_timeout=1.0
        )

        result = await service.list_all()

        assert len(result) == 4


class TestIsolation:
    @pytest.mark.asyncio
    async def test_one_failed_signature_is_skipped(
        self,
        service: GalleryService,
        repository: InMemoryProfileRepository,
        store: InMemoryObjectStore,
    ):
        _seed(repository, "alice", "bob", "carol")
        store.fail_sign_for = {avatar_storage_key("bob")}

        result = await service.list_all()

        assert [p.record.username for p in result] == ["alice", "carol"]

    @pytest.mark.asyncio
    async def test_slow_signature_does_not_block_others(
        self, memory_uow: InMemoryUnitOfWork, repository: InMemoryProfileRepository
    ):
        _seed(repository, "alice", "slow", "carol")

        class OneSlowStore(InMemoryObjectStore):
            async def signed_url(self, key: str, expires_in: int) -> str:
                if "slow" in key:
                    await asyncio.sleep(5)
                return f"https://signed/{key}"

        service = GalleryService(
            lambda: memory_uow, object_store=OneSlowStore(), storage_timeout=0.05
        )

        result = await service.list_all()

        assert [p.record.username for p in result] == ["alice", "carol"]

    @pytest.mark.asyncio
    async def test_empty_url_is_treated_as_failure(
        self, memory_uow: InMemoryUnitOfWork, repository: InMemoryProfileRepository
    ):
        _seed(repository, "alice", "bob")

        class BlankStore(InMemoryObjectStore):
            async def signed_url(self, key: str, expires_in: int) -> str:
                return "" if "bob" in key else f"https://signed/{key}"

        service = GalleryService(lambda: memory_uow, object_store=BlankStore())

        result = await service.list_all()

        assert [p.record.username for p in result] == ["alice"]

    @pytest.mark.asyncio
    async def test_every_signature_failing_yields_empty_list(
        self,
        service: GalleryService,
        repository: InMemoryProfileRepository,
        store: InMemoryObjectStore,
    ):
        _seed(repository, "alice", "bob")
        store.fail_sign_for = {avatar_storage_key("alice"), avatar_storage_key("bob")}

        assert await service.list_all() == []


class TestScanFailure:
    @pytest.mark.asyncio
    async def test_scan_failure_fails_listing(
        self, service: GalleryService, repository: InMemoryProfileRepository
    ):
        repository.fail_scan = True

        with pytest.raises(StorageError):
            await service.list_all()

    @pytest.mark.asyncio
    async def test_scan_timeout_is_storage_error(self, uow: FakeUnitOfWork):
        async def hang() -> list[ProfileRecord]:
            await asyncio.sleep(1)
            return []

        uow.profiles.list_all.side_effect = hang
        service = GalleryService(
            lambda: uow, object_store=InMemoryObjectStore(), storage_timeout=0.01
        )

        with pytest.raises(StorageError) as exc_info:
            await service.list_all()

        assert exc_info.value.operation == "profile_scan"
