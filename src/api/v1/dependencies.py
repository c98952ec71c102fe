"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.gallery_service import GalleryService
from domain.services.ingestion_service import IngestionService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.github.client import GitHubProfileSource
from infrastructure.storage.s3_object_store import S3ObjectStore


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_profile_source() -> GitHubProfileSource:
    """Get the shared GitHub client."""
    return GitHubProfileSource(
        api_url=settings.github_api_url,
        token=settings.github_token,
        timeout=settings.github_timeout_seconds,
    )


@lru_cache
def get_object_store() -> S3ObjectStore:
    """Get the shared S3 avatar store."""
    return S3ObjectStore(
        bucket=settings.avatar_bucket,
        region=settings.aws_region or None,
        endpoint_url=settings.s3_endpoint_url or None,
        timeout=settings.storage_timeout_seconds,
    )


@lru_cache
def get_ingestion_service() -> IngestionService:
    """Get Ingestion service instance."""
    return IngestionService(
        get_uow_factory(),
        source=get_profile_source(),
        object_store=get_object_store(),
        key_prefix=settings.avatar_key_prefix,
        key_extension=settings.avatar_key_extension,
        content_type=settings.avatar_content_type,
        url_expiry_seconds=settings.signed_url_expiry_seconds,
        storage_timeout=settings.storage_timeout_seconds,
    )


@lru_cache
def get_gallery_service() -> GalleryService:
    """Get Gallery service instance."""
    return GalleryService(
        get_uow_factory(),
        object_store=get_object_store(),
        url_expiry_seconds=settings.signed_url_expiry_seconds,
        storage_timeout=settings.storage_timeout_seconds,
        max_concurrency=settings.gallery_sign_concurrency,
    )
