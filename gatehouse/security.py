"""Password hashing and bearer token helpers."""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings
from .exceptions import AuthenticationError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(
    subject: str, settings: Settings, expires_delta: timedelta | None = None
) -> str:
    """Issue a signed token whose ``sub`` claim is `subject`."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    claims = {"sub": subject, "exp": datetime.now(UTC) + expires_delta}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> str:
    """Return the subject of a valid token.

    Raises:
        AuthenticationError: If the signature, expiry or subject is invalid
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        raise AuthenticationError("Could not validate credentials") from e

    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        raise AuthenticationError("Could not validate credentials")
    return subject
