from typing import Final

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .exceptions import InvalidCredentialsError, UserAlreadyExistsError
from .logging_config import get_logger
from .models import LoginRequest, RegisterRequest, User
from .security import get_password_hash, verify_password

logger: Final = get_logger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == _normalize_email(email))
    return session.exec(statement).first()


def get_user(session: Session, user_id: int) -> User | None:
    return session.get(User, user_id)


def register_user(session: Session, data: RegisterRequest) -> User:
    """Create a user with a hashed password.

    Raises:
        UserAlreadyExistsError: If the email is already registered
    """
    email = _normalize_email(data.email)
    if get_user_by_email(session, email) is not None:
        logger.warning("Registration rejected - email taken", email=email)
        raise UserAlreadyExistsError(f"Email '{email}' is already registered")

    user = User(
        email=email,
        name=data.name.strip(),
        hashed_password=get_password_hash(data.password),
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same email
        session.rollback()
        raise UserAlreadyExistsError(f"Email '{email}' is already registered") from e
    session.refresh(user)

    logger.info("User registered", user_id=user.id)
    return user


def authenticate_user(session: Session, data: LoginRequest) -> User:
    """Return the user matching the credentials.

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong
    """
    user = get_user_by_email(session, data.email)
    if user is None or not verify_password(data.password, user.hashed_password):
        logger.info("Login failed", email=_normalize_email(data.email))
        raise InvalidCredentialsError("Incorrect email or password")
    return user
