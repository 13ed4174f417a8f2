"""
Catalog read service: accommodations, packages and the flat marketing tables.

Every function is a plain read. Nested packages are loaded with one extra
IN query (selectinload) instead of one query per accommodation.
"""

from typing import Optional

from sqlalchemy import select, func, literal, union_all, String, cast
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from resort_api.core.exceptions import NotFoundError
from resort_api.core.logging import get_logger
from resort_api.models.accommodation import Accommodation, Package
from resort_api.models.catalog import (
    Activity, Faq, GalleryImage, MealPlan, NearbyLocation, Testimonial,
)
from resort_api.schemas.catalog import (
    AccommodationResponse, PackageResponse, MealPlanResponse, ActivityResponse,
    FaqResponse, GalleryImageResponse, TestimonialResponse, NearbyLocationResponse,
    ImageEntry, CatalogResponse,
)

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _with_active_packages():
    return selectinload(Accommodation.packages.and_(Package.active.is_(True)))


async def list_accommodations(
    db: AsyncSession,
    type_: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> tuple[list[AccommodationResponse], int]:
    """
    List accommodations with their active packages.

    Pagination applies only when ``page`` or ``limit`` is given; the total
    row count for the filter is returned either way.
    """
    query = select(Accommodation)
    if type_:
        query = query.where(Accommodation.type == type_)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar()

    query = query.options(_with_active_packages()).order_by(Accommodation.id)
    if page is not None or limit is not None:
        page = page or 1
        limit = min(limit or DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
        query = query.offset((page - 1) * limit).limit(limit)

    result = await db.execute(query)
    accommodations = [AccommodationResponse.model_validate(a) for a in result.scalars().all()]
    return accommodations, total


async def get_accommodation(db: AsyncSession, accommodation_id: int) -> AccommodationResponse:
    result = await db.execute(
        select(Accommodation)
        .where(Accommodation.id == accommodation_id)
        .options(_with_active_packages())
    )
    accommodation = result.scalar_one_or_none()

    if not accommodation:
        raise NotFoundError(f"Accommodation {accommodation_id} not found")
    return AccommodationResponse.model_validate(accommodation)


async def list_packages(
    db: AsyncSession,
    accommodation_id: Optional[int] = None,
    package_id: Optional[int] = None,
) -> list[PackageResponse]:
    """Active packages, optionally narrowed by accommodation and/or package id."""
    query = select(Package).where(Package.active.is_(True))
    if accommodation_id is not None:
        query = query.where(Package.accommodation_id == accommodation_id)
    if package_id is not None:
        query = query.where(Package.id == package_id)

    result = await db.execute(query.order_by(Package.accommodation_id, Package.id))
    return [PackageResponse.model_validate(p) for p in result.scalars().all()]


async def get_package(db: AsyncSession, accommodation_id: int, package_id: int) -> PackageResponse:
    packages = await list_packages(db, accommodation_id, package_id)
    if not packages:
        raise NotFoundError(
            f"Package {package_id} not found for accommodation {accommodation_id}"
        )
    return packages[0]


async def list_meal_plans(db: AsyncSession) -> list[MealPlanResponse]:
    result = await db.execute(select(MealPlan).order_by(MealPlan.id))
    return [MealPlanResponse.model_validate(m) for m in result.scalars().all()]


async def list_activities(db: AsyncSession) -> list[ActivityResponse]:
    result = await db.execute(select(Activity).order_by(Activity.id))
    return [ActivityResponse.model_validate(a) for a in result.scalars().all()]


async def list_faqs(db: AsyncSession) -> list[FaqResponse]:
    result = await db.execute(select(Faq).order_by(Faq.sort_order, Faq.id))
    return [FaqResponse.model_validate(f) for f in result.scalars().all()]


async def list_gallery(db: AsyncSession) -> list[GalleryImageResponse]:
    result = await db.execute(select(GalleryImage).order_by(GalleryImage.id))
    return [GalleryImageResponse.model_validate(g) for g in result.scalars().all()]


async def list_testimonials(db: AsyncSession) -> list[TestimonialResponse]:
    result = await db.execute(select(Testimonial).order_by(Testimonial.id))
    return [TestimonialResponse.model_validate(t) for t in result.scalars().all()]


async def list_nearby_locations(db: AsyncSession) -> list[NearbyLocationResponse]:
    result = await db.execute(select(NearbyLocation).order_by(NearbyLocation.id))
    return [NearbyLocationResponse.model_validate(n) for n in result.scalars().all()]


async def get_full_catalog(db: AsyncSession) -> CatalogResponse:
    """Every catalog table in one payload."""
    accommodations, _ = await list_accommodations(db)
    return CatalogResponse(
        accommodations=accommodations,
        packages=await list_packages(db),
        meal_plans=await list_meal_plans(db),
        activities=await list_activities(db),
        faqs=await list_faqs(db),
        gallery=await list_gallery(db),
        testimonials=await list_testimonials(db),
        nearby_locations=await list_nearby_locations(db),
    )


def _image_rows(model, title_col, image_col, category, source: str):
    """One branch of the image union, normalized to (id, title, image, category, source)."""
    return (
        select(
            model.id.label("id"),
            cast(title_col, String).label("title"),
            cast(image_col, String).label("image"),
            cast(category, String).label("category"),
            literal(source, type_=String).label("source"),
        )
        .where(image_col.is_not(None))
    )


async def list_all_images(db: AsyncSession) -> list[ImageEntry]:
    """
    Union of image-bearing rows from six tables, tagged by origin.

    ``source`` names the table; ``category`` is the row's own category where
    the table has one (accommodation type, gallery category) and a fixed
    label otherwise.
    """
    union = union_all(
        _image_rows(Accommodation, Accommodation.name, Accommodation.images, Accommodation.type, "accommodations"),
        _image_rows(Package, Package.name, Package.image, literal("package"), "packages"),
        _image_rows(Activity, Activity.name, Activity.image, literal("activity"), "activities"),
        _image_rows(NearbyLocation, NearbyLocation.name, NearbyLocation.image, literal("nearby"), "nearby_locations"),
        _image_rows(GalleryImage, GalleryImage.title, GalleryImage.image_url, GalleryImage.category, "gallery_images"),
        _image_rows(Testimonial, Testimonial.guest_name, Testimonial.image, literal("testimonial"), "testimonials"),
    ).subquery()

    result = await db.execute(select(union).order_by(union.c.source, union.c.id))
    return [ImageEntry.model_validate(dict(row)) for row in result.mappings().all()]
