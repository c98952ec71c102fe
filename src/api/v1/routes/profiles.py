"""Profile API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.v1.dependencies import get_gallery_service, get_ingestion_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.profile import ProfileResponse
from core.rate_limit import limiter
from domain.services.gallery_service import GalleryService
from domain.services.ingestion_service import IngestionService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "",
    response_model=list[ProfileResponse] | ProfileResponse,
    summary="List the gallery, or ingest one GitHub user",
    responses={
        200: {"description": "Gallery array, or the ingested profile when `username` is given"},
        400: {"model": ErrorResponse, "description": "Invalid GitHub username"},
        404: {"model": ErrorResponse, "description": "No such GitHub user"},
        500: {"model": ErrorResponse, "description": "Storage or internal failure"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profiles(
    request: Request,
    username: str | None = Query(
        None,
        max_length=100,
        description="GitHub login to fetch and store; omit to list the gallery",
    ),
    gallery: GalleryService = Depends(get_gallery_service),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> list[ProfileResponse] | ProfileResponse:
    """
    Without `username`, return every stored profile with fresh avatar URLs.

    With `username`, fetch the user from GitHub, store the avatar and
    metadata (overwriting any earlier copy) and return the stored profile.
    GitHub's status code is passed through when it rejects the username.
    """
    username = (username or "").strip()
    if not username:
        profiles = await gallery.list_all()
        return [ProfileResponse.from_hydrated(p) for p in profiles]

    profile = await ingestion.ingest(username)
    return ProfileResponse.from_hydrated(profile)
