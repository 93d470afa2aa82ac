"""Authentication route group: register, login and current user."""

from typing import Annotated, Final

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from .config import Settings
from .database import get_session
from .exceptions import AuthenticationError
from .logging_config import get_logger
from .models import AuthResponse, LoginRequest, RegisterRequest, User, UserRead
from .request_utils import body_parser, get_settings
from .security import create_access_token, decode_access_token
from .user_service import authenticate_user, get_user, register_user

logger: Final = get_logger(__name__)

router: Final = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[Session, Depends(get_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def _auth_response(user: User, settings: Settings) -> AuthResponse:
    token = create_access_token(str(user.id), settings)
    return AuthResponse(token=token, user=UserRead.model_validate(user))


def get_current_user(
    session: SessionDep,
    settings: SettingsDep,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> User:
    """Resolve the user from the ``Authorization: Bearer`` header."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    subject = decode_access_token(credentials.credentials, settings)
    if not subject.isdigit():
        raise AuthenticationError("Could not validate credentials")

    user = get_user(session, int(subject))
    if user is None:
        raise AuthenticationError("Could not validate credentials")
    return user


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    data: Annotated[RegisterRequest, Depends(body_parser(RegisterRequest))],
    session: SessionDep,
    settings: SettingsDep,
) -> AuthResponse:
    user = register_user(session, data)
    return _auth_response(user, settings)


@router.post("/login", response_model=AuthResponse)
def login(
    data: Annotated[LoginRequest, Depends(body_parser(LoginRequest))],
    session: SessionDep,
    settings: SettingsDep,
) -> AuthResponse:
    user = authenticate_user(session, data)
    logger.info("User logged in", user_id=user.id)
    return _auth_response(user, settings)


@router.get("/me", response_model=UserRead)
def read_current_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserRead:
    return UserRead.model_validate(current_user)
