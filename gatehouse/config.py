import re
from enum import StrEnum
from pathlib import Path
from typing import Any, Final

from pydantic import (
    AliasChoices,
    Field,
    ValidationError,
    computed_field,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_STATIC_DIR,
    MIN_SECRET_KEY_LENGTH,
)
from .logging_config import get_logger
from .logging_utils import is_sensitive_field, mask_database_url

logger: Final = get_logger(__name__)

_DIGITS: Final = re.compile(r"[0-9]+")


class RuntimeMode(StrEnum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env files.

    Built once at process entry by `load_config` and handed to the app factory
    and the server bootstrap. Instances are frozen.
    """

    # Server configuration
    port: int = Field(
        default=DEFAULT_PORT,
        gt=0,
        le=65535,
        validation_alias="PORT",
        description="Server port",
    )
    host: str = Field(
        default=DEFAULT_HOST, validation_alias="HOST", description="Server host"
    )
    node_env: RuntimeMode = Field(
        default=RuntimeMode.DEVELOPMENT,
        validation_alias="NODE_ENV",
        description="Runtime mode",
    )
    static_dir: Path = Field(
        default=Path(DEFAULT_STATIC_DIR),
        validation_alias="STATIC_DIR",
        description="Directory served as static files",
    )

    # Database configuration
    database_url: str = Field(
        validation_alias=AliasChoices("MONGO_URI", "DATABASE_URL"),
        description="Database connection URL",
    )

    # Security configuration
    jwt_secret: str = Field(
        validation_alias="JWT_SECRET", description="Secret used to sign tokens"
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60, gt=0, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    # Observability
    enable_telemetry: bool = Field(
        default=False,
        validation_alias="ENABLE_TELEMETRY",
        description="Enable OpenTelemetry tracing",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("port", mode="before")
    @classmethod
    def validate_port(cls, v: Any) -> Any:
        if isinstance(v, str) and not _DIGITS.fullmatch(v):
            raise ValueError("PORT must contain digits only")
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v:
            raise ValueError("MONGO_URI is required")
        return v

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if len(v) < MIN_SECRET_KEY_LENGTH:
            raise ValueError(
                f"JWT_SECRET must be at least {MIN_SECRET_KEY_LENGTH} "
                "characters for security"
            )
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.node_env is RuntimeMode.DEVELOPMENT

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.node_env is RuntimeMode.PRODUCTION


def format_validation_errors(error: ValidationError) -> list[str]:
    """Render every violation as ``<FIELD>: <message>``."""
    lines = []
    for err in error.errors():
        path = ".".join(str(part) for part in err["loc"])
        if err["type"] == "value_error":
            message = str(err["ctx"]["error"])
        else:
            message = err["msg"]
        lines.append(f"{path}: {message}")
    return lines


def load_config(env_file: str | Path | None = ".env") -> Settings:
    """Validate the environment and return the settings.

    Variables already present in the process environment take precedence
    over the override file, which is skipped when it does not exist.

    Raises:
        SystemExit: With status 1 after logging every violation.
    """
    try:
        settings = Settings(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as e:
        logger.error("Invalid environment configuration")
        for line in format_validation_errors(e):
            logger.error(f"  - {line}")
        logger.error("Please check your .env file and fix the above errors.")
        raise SystemExit(1) from e

    logger.info("Environment configuration validated successfully")
    return settings


def describe_settings(settings: Settings) -> dict[str, str]:
    """Return the settings as strings with secrets redacted."""
    described = {}
    for name, value in settings.model_dump().items():
        if is_sensitive_field(name):
            described[name] = "[REDACTED]"
        elif name == "database_url":
            described[name] = mask_database_url(value)
        else:
            described[name] = str(value)
    return described
