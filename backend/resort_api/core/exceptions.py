"""
Domain exceptions rendered as JSON error bodies.

Every error leaving the API has the same shape:

    {"error": "<short title>", "message": "<detail>", "code": "<ERROR_CODE>"}

plus optional detail keys (for example ``missingFields``). Services raise
these; the handlers in ``resort_api.api.errors`` turn them into responses.
"""

from enum import Enum
from typing import Any, Optional

from fastapi import status


class ErrorCode(str, Enum):
    """Stable machine-readable error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    ACCOMMODATION_UNAVAILABLE = "ACCOMMODATION_UNAVAILABLE"
    INSUFFICIENT_ROOMS = "INSUFFICIENT_ROOMS"
    BOOKING_CREATION_ERROR = "BOOKING_CREATION_ERROR"
    PAYMENT_VALIDATION_ERROR = "PAYMENT_VALIDATION_ERROR"
    PAYMENT_GATEWAY_CONFIG_ERROR = "PAYMENT_GATEWAY_CONFIG_ERROR"
    DB_CONNECTION_ERROR = "DB_CONNECTION_ERROR"
    DB_QUERY_ERROR = "DB_QUERY_ERROR"
    DB_HEALTH_CHECK_FAILED = "DB_HEALTH_CHECK_FAILED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ResortAPIError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    error: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.error
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.error, "message": self.message, "code": self.code.value}
        body.update(self.details)
        return body


class ValidationError(ResortAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.VALIDATION_ERROR
    error = "Validation failed"


class NotFoundError(ResortAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    code = ErrorCode.NOT_FOUND
    error = "Not found"


class AccommodationUnavailableError(ResortAPIError):
    status_code = status.HTTP_409_CONFLICT
    code = ErrorCode.ACCOMMODATION_UNAVAILABLE
    error = "Accommodation not available"


class InsufficientRoomsError(ResortAPIError):
    status_code = status.HTTP_409_CONFLICT
    code = ErrorCode.INSUFFICIENT_ROOMS
    error = "Not enough rooms available"


class BookingCreationError(ResortAPIError):
    code = ErrorCode.BOOKING_CREATION_ERROR
    error = "Failed to create booking"


class PaymentValidationError(ResortAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.PAYMENT_VALIDATION_ERROR
    error = "Invalid payment request"


class PaymentGatewayConfigError(ResortAPIError):
    """Merchant credentials are missing. Not caused by the request."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = ErrorCode.PAYMENT_GATEWAY_CONFIG_ERROR
    error = "Payment gateway not configured"


class DatabaseUnavailableError(ResortAPIError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = ErrorCode.DB_CONNECTION_ERROR
    error = "Service unavailable"


class RateLimitExceededError(ResortAPIError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = ErrorCode.RATE_LIMIT_EXCEEDED
    error = "Too many requests"
