"""Domain-specific exceptions."""

from fastapi import status


class GatehouseError(Exception):
    """Base exception for domain errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST


class UserAlreadyExistsError(GatehouseError):
    """Raised when registering an email that is already taken."""

    status_code = status.HTTP_409_CONFLICT


class InvalidCredentialsError(GatehouseError):
    """Raised when an email/password pair does not match a user."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthenticationError(GatehouseError):
    """Raised when a bearer token is missing, invalid or expired."""

    status_code = status.HTTP_401_UNAUTHORIZED
