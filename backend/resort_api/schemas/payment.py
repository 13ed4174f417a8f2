"""
Pydantic schemas for the PayU hand-off.
"""

from typing import Any, ClassVar, Optional, Union
from pydantic import BaseModel


class PayURequest(BaseModel):
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = (
        "amount", "firstname", "email", "productinfo", "booking_id",
    )

    # Left untyped so a bad amount is reported as PAYMENT_VALIDATION_ERROR
    amount: Any = None
    firstname: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    productinfo: Optional[str] = None
    booking_id: Optional[Union[int, str]] = None

    def missing_fields(self) -> list[str]:
        missing = []
        for name in self.REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing


class PayUFormData(BaseModel):
    """Form fields the browser posts to the gateway, hash included."""

    key: str
    txnid: str
    amount: str
    productinfo: str
    firstname: str
    email: str
    phone: str
    surl: str
    furl: str
    hash: str
    service_provider: str = "payu_paisa"
    udf1: str


class PayUPayment(BaseModel):
    gateway: str = "payu"
    url: str
    data: PayUFormData


class PayUResponse(BaseModel):
    success: bool = True
    payment: PayUPayment
