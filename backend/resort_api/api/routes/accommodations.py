"""
Accommodation and package endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from resort_api.db.session import get_db
from resort_api.schemas.catalog import AccommodationResponse, PackageResponse
from resort_api.services.catalog_service import (
    get_accommodation, get_package, list_accommodations, list_packages, MAX_PAGE_SIZE,
)

router = APIRouter(tags=["Accommodations"])


@router.get("/accommodations", response_model=list[AccommodationResponse])
async def list_accommodations_endpoint(
    response: Response,
    type: Optional[str] = Query(None, description="Filter by accommodation type"),
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
):
    """
    List accommodations, each with its active packages.
    Pass page/limit to paginate; the unpaginated total is in X-Total-Count.
    """
    accommodations, total = await list_accommodations(db, type, page, limit)
    response.headers["X-Total-Count"] = str(total)
    return accommodations


@router.get("/accommodations/{accommodation_id}", response_model=AccommodationResponse)
async def get_accommodation_endpoint(accommodation_id: int, db: AsyncSession = Depends(get_db)):
    return await get_accommodation(db, accommodation_id)


@router.get(
    "/accommodations/{accommodation_id}/packages/{package_id}",
    response_model=PackageResponse,
)
async def get_package_endpoint(
    accommodation_id: int,
    package_id: int,
    db: AsyncSession = Depends(get_db),
):
    """One active package, addressed by its accommodation and its own id."""
    return await get_package(db, accommodation_id, package_id)


@router.get("/packages", response_model=list[PackageResponse])
async def list_packages_endpoint(
    accommodation_id: Optional[int] = Query(None),
    package_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await list_packages(db, accommodation_id, package_id)
