"""
PayU payment initiation.
"""

from fastapi import APIRouter, Depends, Request

from resort_api.core.config import Settings, get_settings
from resort_api.schemas.payment import PayURequest, PayUResponse
from resort_api.services.payment_service import create_payu_payment

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/payu", response_model=PayUResponse)
async def initiate_payu_payment(
    payment_request: PayURequest,
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Sign a PayU checkout form for a booking.
    The client posts the returned data to payment.url itself.
    """
    payment = create_payu_payment(payment_request, settings, base_url=str(request.base_url))
    return PayUResponse(payment=payment)
