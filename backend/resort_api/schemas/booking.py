"""
Pydantic schemas for booking-related request/response validation.

Every request field is optional at the schema level: presence of the
required ones is checked by the booking service so that a missing field is
reported as VALIDATION_ERROR with the full list, not as a framework 422.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional
from pydantic import BaseModel, field_validator


class BookingStatus(str, Enum):
    # paid/failed are decided by the gateway and never recorded here
    CREATED = "created"
    PAYMENT_INITIATED = "payment_initiated"


class BookingCreate(BaseModel):
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = (
        "accommodation_id", "guest_name", "guest_email",
        "rooms", "adults", "check_in", "check_out",
    )
    COUNT_FIELDS: ClassVar[tuple[str, ...]] = (
        "rooms", "adults", "children", "food_veg", "food_nonveg", "food_jain",
    )

    accommodation_id: Optional[int] = None
    package_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    rooms: Optional[int] = None
    adults: Optional[int] = None
    children: Optional[int] = None
    food_veg: Optional[int] = None
    food_nonveg: Optional[int] = None
    food_jain: Optional[int] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    total_amount: Optional[Decimal] = None
    advance_amount: Optional[Decimal] = None
    coupon_code: Optional[str] = None

    model_config = {"str_strip_whitespace": True}

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def missing_fields(self) -> list[str]:
        """Required fields that are absent, null, blank or zero."""
        return [name for name in self.REQUIRED_FIELDS if not getattr(self, name)]

    def to_row(self) -> dict:
        """Column values for the insert; unset optionals are explicit None."""
        return self.model_dump()


class BookingLinks(BaseModel):
    payment: str


class BookingCreatedResponse(BaseModel):
    success: bool = True
    booking_id: int
    status: BookingStatus = BookingStatus.CREATED
    links: BookingLinks
