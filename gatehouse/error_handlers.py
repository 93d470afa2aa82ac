"""Conversion of domain errors into HTTP responses."""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from .exceptions import GatehouseError
from .logging_config import get_logger

logger = get_logger(__name__)


async def handle_domain_error(
    request: Request, exc: GatehouseError
) -> JSONResponse:
    """Global handler for domain-specific errors."""
    logger.warning(
        "Domain error occurred",
        error_type=type(exc).__name__,
        error_message=str(exc),
        path=request.url.path,
    )

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc)},
        headers=headers,
    )
