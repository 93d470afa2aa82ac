from datetime import UTC, datetime
from typing import Annotated

from pydantic import BaseModel, StringConstraints
from pydantic import Field as SchemaField
from sqlmodel import Field, SQLModel

MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 254
MIN_PASSWORD_LENGTH = 8
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

UserName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_NAME_LENGTH),
]
Email = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True, max_length=MAX_EMAIL_LENGTH, pattern=EMAIL_PATTERN
    ),
]


class User(SQLModel, table=True):  # type: ignore[call-arg]
    """A registered account."""

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True, max_length=MAX_EMAIL_LENGTH)
    name: str = Field(max_length=MAX_NAME_LENGTH)
    hashed_password: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class UserRead(SQLModel):
    """Public projection of a user, never carries the password hash."""

    id: int
    email: str
    name: str
    created_at: datetime


class RegisterRequest(BaseModel):
    name: UserName
    email: Email
    password: str = SchemaField(min_length=MIN_PASSWORD_LENGTH)


class LoginRequest(BaseModel):
    email: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    password: str = SchemaField(min_length=1)


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserRead
