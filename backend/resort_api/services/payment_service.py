"""
PayU hosted-checkout hand-off.

The browser posts the returned form fields straight to PayU; this service
only builds and signs them and never touches the database. The signature is

    sha512(key|txnid|amount|productinfo|firstname|email|udf1|...|udf10|salt)

with udf1 carrying the booking id and udf2..udf10 left empty.
"""

import hashlib
import secrets
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from resort_api.core.config import Settings
from resort_api.core.exceptions import PaymentGatewayConfigError, PaymentValidationError
from resort_api.core.logging import get_logger
from resort_api.core.metrics import record_payment_initiation
from resort_api.schemas.payment import PayUFormData, PayUPayment, PayURequest

logger = get_logger(__name__)

UDF_FIELD_COUNT = 10
SERVICE_PROVIDER = "payu_paisa"
PAISA = Decimal("0.01")


def require_credentials(settings: Settings) -> tuple[str, str]:
    """Merchant key and salt, or a configuration error if either is unset."""
    if not settings.payu_configured:
        record_payment_initiation("misconfigured")
        logger.critical("payu_credentials_missing")
        raise PaymentGatewayConfigError("Payment gateway configuration missing")
    return settings.PAYU_MERCHANT_KEY, settings.PAYU_MERCHANT_SALT


def normalize_amount(raw: Any) -> str:
    """
    Positive amount as a two-decimal string, the exact text that gets signed.

    Amounts are never rounded: anything finer than one paisa is rejected.
    """
    if isinstance(raw, bool):
        raise PaymentValidationError("Invalid amount")
    try:
        amount = Decimal(str(raw).strip())
        if not amount.is_finite():
            raise PaymentValidationError("Invalid amount")
        normalized = amount.quantize(PAISA)
    except (InvalidOperation, ValueError):
        raise PaymentValidationError("Invalid amount")

    if normalized != amount:
        raise PaymentValidationError("Amount cannot have more than 2 decimal places")
    if normalized <= 0:
        raise PaymentValidationError("Invalid amount")
    return str(normalized)


def generate_txnid() -> str:
    """Fresh transaction id: epoch milliseconds plus a random suffix."""
    return f"TXN{int(time.time() * 1000)}{secrets.token_hex(4)}"


def build_hash_string(
    key: str,
    txnid: str,
    amount: str,
    productinfo: str,
    firstname: str,
    email: str,
    udfs: list[str],
    salt: str,
) -> str:
    udfs = list(udfs) + [""] * (UDF_FIELD_COUNT - len(udfs))
    if len(udfs) != UDF_FIELD_COUNT:
        raise ValueError(f"PayU accepts at most {UDF_FIELD_COUNT} user-defined fields")
    return "|".join([key, txnid, amount, productinfo, firstname, email, *udfs, salt])


def compute_hash(hash_string: str) -> str:
    return hashlib.sha512(hash_string.encode("utf-8")).hexdigest()


def create_payu_payment(
    request: PayURequest,
    settings: Settings,
    base_url: Optional[str] = None,
) -> PayUPayment:
    """
    Validate the request and return the signed PayU form.

    Credentials are checked first so a misconfigured server never reports
    the problem as the caller's fault.
    """
    key, salt = require_credentials(settings)

    missing = request.missing_fields()
    if missing:
        record_payment_initiation("invalid")
        raise PaymentValidationError("Missing required payment fields", missingFields=missing)

    try:
        amount = normalize_amount(request.amount)
    except PaymentValidationError:
        record_payment_initiation("invalid")
        raise

    booking_ref = str(request.booking_id)
    txnid = generate_txnid()
    signature = compute_hash(
        build_hash_string(
            key, txnid, amount, request.productinfo, request.firstname, request.email,
            [booking_ref], salt,
        )
    )

    base = (base_url or "").rstrip("/")
    data = PayUFormData(
        key=key,
        txnid=txnid,
        amount=amount,
        productinfo=request.productinfo,
        firstname=request.firstname,
        email=request.email,
        phone=request.phone or "",
        surl=settings.PAYMENT_SUCCESS_URL or f"{base}/payment/success",
        furl=settings.PAYMENT_FAILURE_URL or f"{base}/payment/failure",
        hash=signature,
        service_provider=SERVICE_PROVIDER,
        udf1=booking_ref,
    )

    record_payment_initiation("signed")
    logger.info("payment_initiated", booking_id=booking_ref, txnid=txnid, amount=amount)
    return PayUPayment(url=settings.PAYU_URL, data=data)
