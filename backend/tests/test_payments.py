"""
Tests for the PayU payment hand-off.
"""

import hashlib

import pytest
from httpx import AsyncClient

from resort_api.core.config import Settings, get_settings
from resort_api.core.exceptions import PaymentValidationError
from resort_api.main import app
from resort_api.services.payment_service import (
    build_hash_string, compute_hash, generate_txnid, normalize_amount,
)

MERCHANT_KEY = "test_merchant_key"
MERCHANT_SALT = "test_merchant_salt"


@pytest.fixture
def payu_settings():
    """Pin the merchant credentials regardless of the surrounding environment."""
    settings = Settings(
        PAYU_MERCHANT_KEY=MERCHANT_KEY,
        PAYU_MERCHANT_SALT=MERCHANT_SALT,
        PAYMENT_SUCCESS_URL=None,
        PAYMENT_FAILURE_URL=None,
    )
    app.dependency_overrides[get_settings] = lambda: settings
    yield settings
    app.dependency_overrides.pop(get_settings, None)


def payment_request(**overrides) -> dict:
    body = {
        "amount": "4500",
        "firstname": "Asha",
        "email": "asha@example.com",
        "phone": "9876543210",
        "productinfo": "Garden Cottage - 2 nights",
        "booking_id": 42,
    }
    body.update(overrides)
    return body


def expected_hash(data: dict) -> str:
    """Independent reimplementation of the PayU request hash."""
    fields = [
        MERCHANT_KEY, data["txnid"], data["amount"], data["productinfo"],
        data["firstname"], data["email"], data["udf1"],
        "", "", "", "", "", "", "", "", "",
        MERCHANT_SALT,
    ]
    return hashlib.sha512("|".join(fields).encode("utf-8")).hexdigest()


@pytest.mark.asyncio
async def test_initiate_payment(client: AsyncClient, payu_settings):
    response = await client.post("/api/payments/payu", json=payment_request())
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True

    payment = body["payment"]
    assert payment["gateway"] == "payu"
    assert payment["url"] == "https://secure.payu.in/_payment"

    data = payment["data"]
    assert data["key"] == MERCHANT_KEY
    assert data["amount"] == "4500.00"
    assert data["udf1"] == "42"
    assert data["service_provider"] == "payu_paisa"
    assert data["surl"] == "http://test/payment/success"
    assert data["furl"] == "http://test/payment/failure"
    assert data["txnid"].startswith("TXN")
    assert data["hash"] == expected_hash(data)
    assert MERCHANT_SALT not in response.text


@pytest.mark.asyncio
async def test_each_call_gets_a_fresh_txnid(client: AsyncClient, payu_settings):
    first = (await client.post("/api/payments/payu", json=payment_request())).json()["payment"]["data"]
    second = (await client.post("/api/payments/payu", json=payment_request())).json()["payment"]["data"]

    assert first["txnid"] != second["txnid"]
    assert first["hash"] != second["hash"]
    assert first["hash"] == expected_hash(first)
    assert second["hash"] == expected_hash(second)


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -10, "abc", "NaN", "Infinity", True])
async def test_invalid_amount(client: AsyncClient, payu_settings, amount):
    response = await client.post("/api/payments/payu", json=payment_request(amount=amount))
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "PAYMENT_VALIDATION_ERROR"
    assert "payment" not in body


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", ["0.001", "0.004", "12.345"])
async def test_sub_paisa_amount_is_not_signed(client: AsyncClient, payu_settings, amount):
    """An amount that would round to a different value is refused, not rounded."""
    response = await client.post("/api/payments/payu", json=payment_request(amount=amount))
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "PAYMENT_VALIDATION_ERROR"
    assert "payment" not in body


@pytest.mark.asyncio
async def test_missing_payment_fields(client: AsyncClient, payu_settings):
    body = payment_request()
    del body["email"]
    del body["booking_id"]

    response = await client.post("/api/payments/payu", json=body)
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "PAYMENT_VALIDATION_ERROR"
    assert data["missingFields"] == ["email", "booking_id"]


@pytest.mark.asyncio
async def test_malformed_payment_body(client: AsyncClient, payu_settings):
    response = await client.post("/api/payments/payu", json=payment_request(firstname=["not", "a", "name"]))
    assert response.status_code == 400
    assert response.json()["code"] == "PAYMENT_VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_configured_return_urls(client: AsyncClient, payu_settings):
    payu_settings.PAYMENT_SUCCESS_URL = "https://resort.example/thanks"
    payu_settings.PAYMENT_FAILURE_URL = "https://resort.example/sorry"

    data = (await client.post("/api/payments/payu", json=payment_request())).json()["payment"]["data"]
    assert data["surl"] == "https://resort.example/thanks"
    assert data["furl"] == "https://resort.example/sorry"


@pytest.mark.asyncio
async def test_missing_credentials_is_config_error(client: AsyncClient):
    """A server without merchant credentials refuses even a valid request."""
    app.dependency_overrides[get_settings] = lambda: Settings(PAYU_MERCHANT_KEY=None, PAYU_MERCHANT_SALT=None)
    try:
        response = await client.post("/api/payments/payu", json=payment_request())
    finally:
        app.dependency_overrides.pop(get_settings, None)

    assert response.status_code == 503
    body = response.json()
    assert body["code"] == "PAYMENT_GATEWAY_CONFIG_ERROR"
    assert "payment" not in body


def test_hash_string_field_order():
    hash_string = build_hash_string("key", "TXN1", "10.00", "stay", "Asha", "a@b.co", ["7"], "salt")
    assert hash_string == "key|TXN1|10.00|stay|Asha|a@b.co|7||||||||||salt"
    assert compute_hash(hash_string) == hashlib.sha512(hash_string.encode()).hexdigest()


def test_txnid_is_unique_across_calls():
    assert len({generate_txnid() for _ in range(1000)}) == 1000


@pytest.mark.parametrize("raw, expected", [("4500", "4500.00"), (1999.5, "1999.50"), ("12.340", "12.34")])
def test_normalize_amount(raw, expected):
    assert normalize_amount(raw) == expected


@pytest.mark.parametrize("raw", ["0.001", "0.004", "12.345", "99.999"])
def test_normalize_amount_never_rounds(raw):
    with pytest.raises(PaymentValidationError):
        normalize_amount(raw)


def test_normalize_amount_rejects_huge_values():
    with pytest.raises(PaymentValidationError):
        normalize_amount("1e40")
