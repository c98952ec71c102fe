"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path

# Test settings must be in place before any application module is imported
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.database.models import Base
from tests.fakes import InMemoryObjectStore, StubProfileSource

# Test database URL (SQLite in memory, one shared connection)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(
    engine: AsyncEngine,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create session factory."""
    factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    yield factory


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    """In-memory avatar store."""
    return InMemoryObjectStore()


@pytest.fixture
def profile_source() -> StubProfileSource:
    """Canned GitHub responses."""
    return StubProfileSource()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client against the module-level app."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api_client(
    session_factory: async_sessionmaker[AsyncSession],
    object_store: InMemoryObjectStore,
    profile_source: StubProfileSource,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to fakes.

    This client:
    - Uses an in-memory SQLite database for the metadata store
    - Uses InMemoryObjectStore in place of S3
    - Uses StubProfileSource in place of GitHub
    """
    from api.v1.dependencies import get_gallery_service, get_ingestion_service
    from domain.services.gallery_service import GalleryService
    from domain.services.ingestion_service import IngestionService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    def override_get_ingestion_service() -> IngestionService:
        return IngestionService(
            test_uow_factory,
            source=profile_source,
            object_store=object_store,
        )

    def override_get_gallery_service() -> GalleryService:
        return GalleryService(test_uow_factory, object_store=object_store)

    app.dependency_overrides[get_ingestion_service] = override_get_ingestion_service
    app.dependency_overrides[get_gallery_service] = override_get_gallery_service

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
