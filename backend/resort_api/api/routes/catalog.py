"""
Flat catalog endpoints plus the two aggregates.
The aggregates are cached in Redis; the single-table reads are not.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from resort_api.db.session import get_db
from resort_api.schemas.catalog import (
    ActivityResponse, CatalogResponse, FaqResponse, GalleryImageResponse, ImageEntry,
    MealPlanResponse, NearbyLocationResponse, TestimonialResponse,
)
from resort_api.services import catalog_service
from resort_api.services.cache_service import (
    CATALOG_ALL_KEY, CATALOG_IMAGES_KEY, get_cached, set_cached,
)

router = APIRouter(tags=["Catalog"])


@router.get("/meal-plans", response_model=list[MealPlanResponse])
async def list_meal_plans(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_meal_plans(db)


@router.get("/activities", response_model=list[ActivityResponse])
async def list_activities(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_activities(db)


@router.get("/faqs", response_model=list[FaqResponse])
async def list_faqs(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_faqs(db)


@router.get("/gallery", response_model=list[GalleryImageResponse])
async def list_gallery(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_gallery(db)


@router.get("/testimonials", response_model=list[TestimonialResponse])
async def list_testimonials(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_testimonials(db)


@router.get("/nearby-locations", response_model=list[NearbyLocationResponse])
async def list_nearby_locations(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_nearby_locations(db)


@router.get("/all", response_model=CatalogResponse)
async def get_full_catalog(db: AsyncSession = Depends(get_db)):
    """Every catalog table in one payload, for the site's first paint."""
    cached = await get_cached(CATALOG_ALL_KEY)
    if cached is not None:
        return CatalogResponse(**cached)

    catalog = await catalog_service.get_full_catalog(db)
    await set_cached(CATALOG_ALL_KEY, catalog.model_dump(mode="json"))
    return catalog


@router.get("/images", response_model=list[ImageEntry])
async def list_all_images(db: AsyncSession = Depends(get_db)):
    """Image-bearing rows from six tables, each tagged with its source."""
    cached = await get_cached(CATALOG_IMAGES_KEY)
    if cached is not None:
        return [ImageEntry(**entry) for entry in cached]

    images = await catalog_service.list_all_images(db)
    await set_cached(CATALOG_IMAGES_KEY, [image.model_dump(mode="json") for image in images])
    return images
