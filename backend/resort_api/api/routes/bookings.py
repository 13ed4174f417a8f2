"""
Booking endpoint with a row-locked availability check.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from resort_api.core.config import get_settings
from resort_api.db.session import get_db
from resort_api.schemas.booking import BookingCreate, BookingCreatedResponse, BookingLinks
from resort_api.services.booking_service import create_booking, today_in_timezone, validate_booking_request

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def validated_booking(booking_data: BookingCreate) -> BookingCreate:
    """Request checks that need no database, resolved before a connection is taken."""
    validate_booking_request(booking_data, today_in_timezone(get_settings().BOOKING_TIMEZONE))
    return booking_data


@router.post("", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate = Depends(validated_booking),
    db: AsyncSession = Depends(get_db),
):
    """
    Reserve rooms and record the guest's booking.

    The accommodation row is locked for the duration of the check, so two
    requests for the last room cannot both succeed. Returns the new booking
    id and the link used to start payment.
    """
    booking = await create_booking(db, booking_data)
    return BookingCreatedResponse(
        booking_id=booking.booking_id,
        links=BookingLinks(payment=f"/api/payments/payu?booking_id={booking.booking_id}"),
    )
