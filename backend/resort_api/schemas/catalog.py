"""
Pydantic schemas for the read-only catalog endpoints.
"""

from typing import Optional
from pydantic import BaseModel

from resort_api.schemas.common import JsonText


class PackageResponse(BaseModel):
    id: int
    accommodation_id: int
    name: str
    description: Optional[str] = None
    price: Optional[float] = None
    duration: Optional[str] = None
    image: Optional[str] = None
    includes: JsonText = None
    detailed_info: JsonText = None
    active: bool

    model_config = {"from_attributes": True}


class AccommodationResponse(BaseModel):
    id: int
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    capacity: Optional[int] = None
    rooms: int
    available: bool
    features: JsonText = None
    images: JsonText = None
    address: Optional[str] = None
    packages: list[PackageResponse] = []

    model_config = {"from_attributes": True}


class MealPlanResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Optional[float] = None
    diet_type: Optional[str] = None
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class ActivityResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    duration: Optional[str] = None
    price: Optional[float] = None
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class FaqResponse(BaseModel):
    id: int
    question: str
    answer: str
    category: Optional[str] = None

    model_config = {"from_attributes": True}


class GalleryImageResponse(BaseModel):
    id: int
    image_url: str
    title: Optional[str] = None
    category: Optional[str] = None

    model_config = {"from_attributes": True}


class TestimonialResponse(BaseModel):
    id: int
    guest_name: str
    location: Optional[str] = None
    rating: Optional[int] = None
    content: str
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class NearbyLocationResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    distance: Optional[str] = None
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class ImageEntry(BaseModel):
    """One image-bearing row from any catalog table."""

    id: int
    source: str
    category: Optional[str] = None
    title: Optional[str] = None
    image: JsonText = None  # A single URL, or a list for accommodations


class CatalogResponse(BaseModel):
    accommodations: list[AccommodationResponse]
    packages: list[PackageResponse]
    meal_plans: list[MealPlanResponse]
    activities: list[ActivityResponse]
    faqs: list[FaqResponse]
    gallery: list[GalleryImageResponse]
    testimonials: list[TestimonialResponse]
    nearby_locations: list[NearbyLocationResponse]
