from resort_api.models.accommodation import Accommodation, Package
from resort_api.models.booking import Booking
from resort_api.models.catalog import Activity, Faq, GalleryImage, MealPlan, NearbyLocation, Testimonial

__all__ = [
    "Accommodation", "Package", "Booking",
    "Activity", "Faq", "GalleryImage", "MealPlan", "NearbyLocation", "Testimonial",
]
