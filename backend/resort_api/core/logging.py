"""
Structured logging configuration using structlog.
JSON lines in production, console output everywhere else.

Every event passes through ``redact_sensitive_fields`` before rendering:
PayU credentials and signatures never reach a log line, and guest contact
details are masked down to what is needed to recognise a booking.
"""

import logging
import sys
import structlog
from resort_api.core.config import get_settings

REDACTED = "[REDACTED]"

# Gateway secrets: dropped entirely
SECRET_KEYS = frozenset({"key", "salt", "hash", "merchant_key", "merchant_salt", "password"})

# Guest contact details: partially masked
CONTACT_KEYS = frozenset({"email", "guest_email", "phone", "guest_phone"})


def mask_contact(value) -> str:
    """'asha@example.com' -> 'a***@example.com', '9876543210' -> '******3210'."""
    text = str(value)
    if "@" in text:
        local, _, domain = text.partition("@")
        return f"{local[:1]}***@{domain}"
    return "*" * max(len(text) - 4, 0) + text[-4:]


def redact_sensitive_fields(logger, method_name, event_dict):
    for name in event_dict.keys() & SECRET_KEYS:
        event_dict[name] = REDACTED
    for name in event_dict.keys() & CONTACT_KEYS:
        if event_dict[name]:
            event_dict[name] = mask_contact(event_dict[name])
    return event_dict


def setup_logging() -> None:
    settings = get_settings()

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        redact_sensitive_fields,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.ENVIRONMENT == "production":
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "development")

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ]
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    # Replace handlers so a reload does not duplicate every line
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # Access lines duplicate request_completed; engine/pool chatter is noise
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "sqlalchemy.pool"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
