"""
Tests for booking creation: validation, availability and concurrency.
"""

import asyncio
import os
from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.dialects import postgresql

from resort_api.core.exceptions import ValidationError
from resort_api.schemas.booking import BookingCreate
from resort_api.services import booking_service
from resort_api.services.booking_service import lock_accommodation_query, validate_booking_request

ROW_LOCKS_SUPPORTED = os.getenv("TEST_DATABASE_URL", "").startswith("postgresql")


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, accommodation, booking_payload, count_bookings):
    """Successful booking returns its id and the payment link."""
    response = await client.post("/api/bookings", json=booking_payload(accommodation.id, rooms=2))
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["status"] == "created"
    assert data["links"]["payment"] == f"/api/payments/payu?booking_id={data['booking_id']}"
    assert await count_bookings() == 1


@pytest.mark.asyncio
async def test_create_booking_with_package(client: AsyncClient, accommodation, booking_payload):
    package_id = (await client.get(f"/api/accommodations/{accommodation.id}")).json()["packages"][0]["id"]
    response = await client.post(
        "/api/bookings",
        json=booking_payload(accommodation.id, package_id=package_id, food_veg=2, coupon_code="MONSOON10"),
    )
    assert response.status_code == 201


@pytest.mark.asyncio
@pytest.mark.parametrize("field", [
    "accommodation_id", "guest_name", "guest_email", "rooms", "adults", "check_in", "check_out",
])
async def test_missing_required_field(client: AsyncClient, accommodation, booking_payload, count_bookings, field):
    """Each required field, when absent, is reported and nothing is written."""
    payload = booking_payload(accommodation.id)
    del payload[field]

    response = await client.post("/api/bookings", json=payload)
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["missingFields"] == [field]
    assert await count_bookings() == 0


@pytest.mark.asyncio
async def test_blank_and_zero_values_count_as_missing(client: AsyncClient, accommodation, booking_payload):
    response = await client.post(
        "/api/bookings",
        json=booking_payload(accommodation.id, guest_name="   ", rooms=0),
    )
    assert response.status_code == 400
    assert set(response.json()["missingFields"]) == {"guest_name", "rooms"}


@pytest.mark.asyncio
@pytest.mark.parametrize("email", [
    "not-an-email", "guest@localhost", "two words@example.com", "@example.com",
    "asha@example..com", "asha@-example.com", "asha.@example.com",
])
async def test_invalid_email(client: AsyncClient, accommodation, booking_payload, count_bookings, email):
    response = await client.post("/api/bookings", json=booking_payload(accommodation.id, guest_email=email))
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert await count_bookings() == 0


@pytest.mark.asyncio
async def test_check_in_in_the_past(client: AsyncClient, accommodation, booking_payload, count_bookings):
    yesterday = date.today() - timedelta(days=2)
    response = await client.post(
        "/api/bookings",
        json=booking_payload(
            accommodation.id,
            check_in=yesterday.isoformat(),
            check_out=(yesterday + timedelta(days=5)).isoformat(),
        ),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert await count_bookings() == 0


@pytest.mark.asyncio
async def test_check_out_before_check_in(client: AsyncClient, accommodation, booking_payload):
    payload = booking_payload(accommodation.id)
    payload["check_out"] = payload["check_in"]
    response = await client.post("/api/bookings", json=payload)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_malformed_date_is_validation_error(client: AsyncClient, accommodation, booking_payload):
    """Unparseable values get the domain error code, not a bare 422."""
    response = await client.post("/api/bookings", json=booking_payload(accommodation.id, check_in="next friday"))
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
@pytest.mark.parametrize("rooms", [1, 5])
async def test_unavailable_accommodation(
    client: AsyncClient, unavailable_accommodation, booking_payload, count_bookings, rooms,
):
    """available=false rejects every request regardless of room count."""
    response = await client.post(
        "/api/bookings", json=booking_payload(unavailable_accommodation.id, rooms=rooms)
    )
    assert response.status_code == 409
    assert response.json()["code"] == "ACCOMMODATION_UNAVAILABLE"
    assert await count_bookings() == 0


@pytest.mark.asyncio
async def test_too_many_rooms(client: AsyncClient, accommodation, booking_payload, count_bookings):
    response = await client.post("/api/bookings", json=booking_payload(accommodation.id, rooms=4))
    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "INSUFFICIENT_ROOMS"
    assert data["available"] == 3
    assert await count_bookings() == 0


@pytest.mark.asyncio
async def test_overlapping_bookings_consume_rooms(
    client: AsyncClient, single_room_accommodation, booking_payload, count_bookings,
):
    """The last room goes once; a later booking for the same nights is refused."""
    first = await client.post("/api/bookings", json=booking_payload(single_room_accommodation.id))
    assert first.status_code == 201

    second = await client.post("/api/bookings", json=booking_payload(single_room_accommodation.id))
    assert second.status_code == 409
    assert second.json()["code"] == "INSUFFICIENT_ROOMS"
    assert await count_bookings() == 1


@pytest.mark.asyncio
async def test_non_overlapping_stays_share_a_room(client: AsyncClient, single_room_accommodation, booking_payload):
    """Check-out day is free for the next guest's check-in."""
    first = booking_payload(single_room_accommodation.id)
    second = booking_payload(
        single_room_accommodation.id,
        check_in=first["check_out"],
        check_out=(date.fromisoformat(first["check_out"]) + timedelta(days=1)).isoformat(),
    )

    assert (await client.post("/api/bookings", json=first)).status_code == 201
    assert (await client.post("/api/bookings", json=second)).status_code == 201


@pytest.mark.asyncio
async def test_book_nonexistent_accommodation(client: AsyncClient, db_session, booking_payload):
    response = await client.post("/api/bookings", json=booking_payload(99999))
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_package_from_other_accommodation(
    client: AsyncClient, accommodation, single_room_accommodation, booking_payload, count_bookings,
):
    package_id = (await client.get(f"/api/accommodations/{accommodation.id}")).json()["packages"][0]["id"]
    response = await client.post(
        "/api/bookings", json=booking_payload(single_room_accommodation.id, package_id=package_id)
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert await count_bookings() == 0


@pytest.mark.skipif(not ROW_LOCKS_SUPPORTED, reason="SELECT ... FOR UPDATE needs PostgreSQL")
@pytest.mark.asyncio
async def test_concurrent_bookings_for_last_room(
    client: AsyncClient, single_room_accommodation, booking_payload, count_bookings,
):
    """Two simultaneous requests for the only room: exactly one wins."""
    payload = booking_payload(single_room_accommodation.id)
    responses = await asyncio.gather(
        client.post("/api/bookings", json=payload),
        client.post("/api/bookings", json=payload),
    )

    codes = sorted(r.status_code for r in responses)
    assert codes == [201, 409]
    loser = next(r for r in responses if r.status_code == 409)
    assert loser.json()["code"] == "INSUFFICIENT_ROOMS"
    assert await count_bookings() == 1


def test_availability_read_locks_the_accommodation_row():
    """On PostgreSQL the availability read is SELECT ... FOR UPDATE on accommodations."""
    sql = str(lock_accommodation_query(7).compile(dialect=postgresql.dialect()))
    assert "FROM accommodations" in sql
    assert sql.rstrip().endswith("FOR UPDATE")


@pytest.mark.asyncio
async def test_booking_reads_availability_under_lock(
    client: AsyncClient, accommodation, booking_payload, monkeypatch,
):
    locked_ids = []

    def recording_lock_query(accommodation_id):
        locked_ids.append(accommodation_id)
        return lock_accommodation_query(accommodation_id)

    monkeypatch.setattr(booking_service, "lock_accommodation_query", recording_lock_query)

    response = await client.post("/api/bookings", json=booking_payload(accommodation.id))
    assert response.status_code == 201
    assert locked_ids == [accommodation.id]


def test_validation_runs_without_storage():
    """Request checks are pure: no session is needed to reject a bad request."""
    today = date(2026, 10, 18)
    request = BookingCreate(
        accommodation_id=1, guest_name="Asha", guest_email="asha@example.com",
        rooms=1, adults=2, check_in=date(2026, 10, 17), check_out=date(2026, 10, 19),
    )
    with pytest.raises(ValidationError, match="today or in the future"):
        validate_booking_request(request, today)

    validate_booking_request(request.model_copy(update={"check_in": today}), today)


def test_optional_fields_normalized_to_none():
    request = BookingCreate(
        accommodation_id=1, guest_name="Asha", guest_email="asha@example.com",
        rooms=1, adults=2, check_in="2026-11-01", check_out="2026-11-03", coupon_code="",
    )
    row = request.to_row()
    for name in ("children", "food_veg", "food_nonveg", "food_jain", "coupon_code", "package_id"):
        assert name in row
        assert row[name] is None
