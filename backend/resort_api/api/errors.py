"""
Exception handlers that render every failure as {error, message, code}.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

from resort_api.core.config import get_settings
from resort_api.core.exceptions import (
    DatabaseUnavailableError,
    ErrorCode,
    ResortAPIError,
)
from resort_api.core.logging import get_logger

logger = get_logger(__name__)

PAYMENT_PATH_PREFIX = "/api/payments"


def _error_response(status_code: int, error: str, message: str, code: ErrorCode, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "code": code.value, **extra},
    )


def _statement_shape(exc: SQLAlchemyError) -> str | None:
    """First 100 characters of the failing statement. Parameters are never logged."""
    statement = getattr(exc, "statement", None)
    if not statement:
        return None
    statement = " ".join(str(statement).split())
    return statement[:100] + ("..." if len(statement) > 100 else "")


async def resort_error_handler(request: Request, exc: ResortAPIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are the caller's mistake: 400 with the domain code."""
    code = (
        ErrorCode.PAYMENT_VALIDATION_ERROR
        if request.url.path.startswith(PAYMENT_PATH_PREFIX)
        else ErrorCode.VALIDATION_ERROR
    )
    invalid_fields = [
        ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        for err in exc.errors()
    ]
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        "One or more fields have an invalid value",
        code,
        invalidFields=invalid_fields,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error_response(
            exc.status_code,
            "Not found",
            f"The requested resource {request.url.path} was not found",
            ErrorCode.NOT_FOUND,
        )
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        code = ErrorCode.METHOD_NOT_ALLOWED
    elif exc.status_code >= 500:
        code = ErrorCode.INTERNAL_SERVER_ERROR
    else:
        code = ErrorCode.VALIDATION_ERROR
    response = _error_response(exc.status_code, str(exc.detail), str(exc.detail), code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def pool_timeout_handler(request: Request, exc: PoolTimeoutError) -> JSONResponse:
    logger.error("db_pool_exhausted")
    error = DatabaseUnavailableError("No database connection available, please retry shortly")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "db_query_failed",
        error_type=type(exc).__name__,
        query=_statement_shape(exc),
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Database error",
        "Failed to load data",
        ErrorCode.DB_QUERY_ERROR,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error_type=type(exc).__name__)
    message = str(exc) if get_settings().DEBUG else "Something went wrong"
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        message,
        ErrorCode.INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResortAPIError, resort_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(PoolTimeoutError, pool_timeout_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
