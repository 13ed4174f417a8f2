"""
Booking service with a concurrency-safe availability check.

CONCURRENCY STRATEGY: Pessimistic row lock
==========================================

Problem:
  Two guests book the last room of an accommodation at the same moment.
  Both read "1 room left", both insert, the accommodation is oversold.

Solution:
  The availability check and the insert run in one transaction that starts
  by locking the accommodation row:

  1. SELECT available, rooms FROM accommodations WHERE id = :id FOR UPDATE
  2. Reject if the row is missing or not available
  3. Sum the rooms of bookings whose stay overlaps the requested dates
  4. Reject if requested rooms > rooms - booked
  5. INSERT the booking, COMMIT (releases the lock)

  A second transaction for the same accommodation blocks at step 1 until
  the first commits or rolls back, then re-reads and sees the new booking
  in step 3. Bookings for different accommodations never wait on each other.

  The accommodation row itself is never updated, so remaining rooms are
  always derived from the bookings table.

Everything that can be checked without the database (required fields,
email shape, dates) is validated before the transaction opens.
"""

import time
from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from resort_api.core.config import get_settings
from resort_api.core.exceptions import (
    AccommodationUnavailableError,
    BookingCreationError,
    InsufficientRoomsError,
    NotFoundError,
    ResortAPIError,
    ValidationError,
)
from resort_api.core.logging import get_logger
from resort_api.core.metrics import booking_latency, record_booking_attempt
from resort_api.models.accommodation import Accommodation, Package
from resort_api.models.booking import Booking
from resort_api.schemas.booking import BookingCreate

logger = get_logger(__name__)

email_adapter = TypeAdapter(EmailStr)


def today_in_timezone(tz_name: str) -> date:
    """Current calendar day in the server's reference timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()


def validate_booking_request(data: BookingCreate, today: date) -> None:
    """Reject requests that are wrong on their face. Touches no storage."""
    missing = data.missing_fields()
    if missing:
        raise ValidationError("Missing required fields", missingFields=missing)

    try:
        email_adapter.validate_python(data.guest_email)
    except PydanticValidationError:
        raise ValidationError("Invalid email format")

    if data.check_in < today:
        raise ValidationError("Check-in date must be today or in the future")

    if data.check_out <= data.check_in:
        raise ValidationError("Check-out date must be after check-in date")

    negative = [name for name in BookingCreate.COUNT_FIELDS if (getattr(data, name) or 0) < 0]
    if negative:
        raise ValidationError(f"Counts cannot be negative: {', '.join(negative)}")


async def _booked_rooms(db: AsyncSession, accommodation_id: int, check_in: date, check_out: date) -> int:
    """Rooms already taken on the accommodation for any night in [check_in, check_out)."""
    result = await db.execute(
        select(func.coalesce(func.sum(Booking.rooms), 0)).where(
            Booking.accommodation_id == accommodation_id,
            Booking.check_in < check_out,
            Booking.check_out > check_in,
        )
    )
    return int(result.scalar_one())


def lock_accommodation_query(accommodation_id: int):
    """Availability read that holds the accommodation row until the transaction ends."""
    return (
        select(Accommodation.available, Accommodation.rooms)
        .where(Accommodation.id == accommodation_id)
        .with_for_update()
    )


async def _reserve(db: AsyncSession, data: BookingCreate) -> Booking:
    """Locked read-check-insert. Caller owns commit/rollback."""
    result = await db.execute(lock_accommodation_query(data.accommodation_id))
    accommodation = result.one_or_none()

    if accommodation is None:
        raise NotFoundError(f"Accommodation {data.accommodation_id} not found")

    if not accommodation.available:
        raise AccommodationUnavailableError(
            f"Accommodation {data.accommodation_id} is not available for booking"
        )

    if data.package_id is not None:
        package = await db.execute(
            select(Package.id).where(
                Package.id == data.package_id,
                Package.accommodation_id == data.accommodation_id,
            )
        )
        if package.scalar_one_or_none() is None:
            raise ValidationError(
                f"Package {data.package_id} does not belong to accommodation {data.accommodation_id}"
            )

    booked = await _booked_rooms(db, data.accommodation_id, data.check_in, data.check_out)
    remaining = max(accommodation.rooms - booked, 0)
    if data.rooms > remaining:
        raise InsufficientRoomsError(
            f"Not enough rooms available. Requested: {data.rooms}, Available: {remaining}",
            requested=data.rooms,
            available=remaining,
        )

    booking = Booking(**data.to_row())
    db.add(booking)
    await db.flush()
    return booking


async def create_booking(db: AsyncSession, data: BookingCreate) -> Booking:
    """
    Validate, then reserve rooms and insert the booking atomically.

    Exactly one row is committed on success. On any failure the transaction
    is rolled back before the error propagates.
    """
    settings = get_settings()
    validate_booking_request(data, today_in_timezone(settings.BOOKING_TIMEZONE))

    start = time.perf_counter()
    try:
        booking = await _reserve(db, data)
        await db.commit()
    except ResortAPIError as e:
        await db.rollback()
        record_booking_attempt("rejected")
        logger.warning(
            "booking_rejected",
            accommodation_id=data.accommodation_id,
            requested_rooms=data.rooms,
            code=e.code.value,
            reason=e.message,
        )
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        record_booking_attempt("error")
        logger.error(
            "booking_transaction_failed",
            accommodation_id=data.accommodation_id,
            error_type=type(e).__name__,
        )
        raise BookingCreationError("Could not save the booking, please try again") from e
    finally:
        booking_latency.observe(time.perf_counter() - start)

    record_booking_attempt("success")
    logger.info(
        "booking_created",
        booking_id=booking.booking_id,
        accommodation_id=booking.accommodation_id,
        rooms=booking.rooms,
        check_in=str(booking.check_in),
        check_out=str(booking.check_out),
    )
    return booking
