import logging
from typing import Any

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

_SENSITIVE_FIELDS = {
    "password",
    "secret",
    "credential",
    "cookie",
    "authorization",
}


def log_api_request(
    request: Request,
    response_status: int,
    process_time_ms: float | None = None,
    request_id: str | None = None,
    logger_name: str = "api",
) -> None:
    """Log API requests with consistent format.

    Args:
        request: FastAPI request object
        response_status: HTTP response status code
        process_time_ms: Request processing time in milliseconds
        request_id: Correlation id echoed to the client
        logger_name: Name of the logger to use
    """
    logger = logging.getLogger(logger_name)

    log_data: dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
        "status_code": response_status,
        "client_ip": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent", "Unknown")[:100],
    }

    if process_time_ms is not None:
        log_data["process_time_ms"] = str(round(process_time_ms, 2))
    if request_id is not None:
        log_data["request_id"] = request_id

    # Different log levels based on status code
    if response_status >= 500:
        log_level = logging.ERROR
    elif response_status >= 400:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    message = f"{request.method} {request.url.path} - {response_status}"
    if process_time_ms is not None:
        message += f" ({process_time_ms:.1f}ms)"

    logger.log(log_level, message, extra=log_data)


def is_sensitive_field(field_name: str) -> bool:
    """Check if a field contains sensitive data that should not be logged.

    Args:
        field_name: Name of the field to check

    Returns:
        True if field is sensitive, False otherwise
    """
    field_lower = field_name.lower()
    return any(sensitive in field_lower for sensitive in _SENSITIVE_FIELDS)


def mask_database_url(url: str) -> str:
    """Hide the password part of a database URL.

    Strings SQLAlchemy cannot parse are returned unchanged.
    """
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return url
