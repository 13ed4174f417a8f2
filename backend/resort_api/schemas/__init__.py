from resort_api.schemas.booking import BookingCreate, BookingCreatedResponse, BookingStatus
from resort_api.schemas.catalog import (
    AccommodationResponse, PackageResponse, MealPlanResponse, ActivityResponse,
    FaqResponse, GalleryImageResponse, TestimonialResponse, NearbyLocationResponse,
    ImageEntry, CatalogResponse,
)
from resort_api.schemas.payment import PayURequest, PayUResponse

__all__ = [
    "BookingCreate", "BookingCreatedResponse", "BookingStatus",
    "AccommodationResponse", "PackageResponse", "MealPlanResponse", "ActivityResponse",
    "FaqResponse", "GalleryImageResponse", "TestimonialResponse", "NearbyLocationResponse",
    "ImageEntry", "CatalogResponse",
    "PayURequest", "PayUResponse",
]
