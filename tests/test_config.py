"""Tests for environment validation at startup."""

from pathlib import Path

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from gatehouse.config import RuntimeMode, Settings, describe_settings, load_config

VALID_SECRET = "a" * 32


def _events(logs: list[dict]) -> str:
    return "\n".join(entry["event"] for entry in logs).lower()


def test_minimal_environment_uses_defaults(clean_env: pytest.MonkeyPatch):
    clean_env.setenv("MONGO_URI", "mongodb://x")
    clean_env.setenv("JWT_SECRET", VALID_SECRET)

    settings = load_config(env_file=None)

    assert settings.port == 5000
    assert settings.node_env is RuntimeMode.DEVELOPMENT
    assert settings.database_url == "mongodb://x"
    assert settings.jwt_secret == VALID_SECRET
    assert settings.is_development
    assert not settings.is_production


def test_successful_load_logs_confirmation(clean_env: pytest.MonkeyPatch):
    clean_env.setenv("MONGO_URI", "mongodb://x")
    clean_env.setenv("JWT_SECRET", VALID_SECRET)

    with capture_logs() as logs:
        load_config(env_file=None)

    assert [entry["event"] for entry in logs] == [
        "Environment configuration validated successfully"
    ]


def test_explicit_values_are_converted(clean_env: pytest.MonkeyPatch):
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("MONGO_URI", "postgresql://db/app")
    clean_env.setenv("JWT_SECRET", VALID_SECRET + "extra")
    clean_env.setenv("NODE_ENV", "production")

    settings = load_config(env_file=None)

    assert settings.port == 8080
    assert settings.node_env is RuntimeMode.PRODUCTION
    assert settings.is_production


def test_database_url_alias_is_accepted(clean_env: pytest.MonkeyPatch):
    clean_env.setenv("DATABASE_URL", "sqlite://")
    clean_env.setenv("JWT_SECRET", VALID_SECRET)

    assert load_config(env_file=None).database_url == "sqlite://"


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"MONGO_URI": None}, "mongo_uri"),
        ({"MONGO_URI": ""}, "mongo_uri"),
        ({"JWT_SECRET": "a" * 31}, "jwt_secret"),
        ({"JWT_SECRET": None}, "jwt_secret"),
        ({"PORT": "80a"}, "port"),
        ({"PORT": "-1"}, "port"),
        ({"PORT": ""}, "port"),
        ({"PORT": "0"}, "port"),
        ({"NODE_ENV": "staging"}, "node_env"),
    ],
)
def test_malformed_environment_exits(
    clean_env: pytest.MonkeyPatch, overrides: dict[str, str | None], field: str
):
    env = {"MONGO_URI": "mongodb://x", "JWT_SECRET": VALID_SECRET, **overrides}
    for name, value in env.items():
        if value is not None:
            clean_env.setenv(name, value)

    with capture_logs() as logs, pytest.raises(SystemExit) as exc_info:
        load_config(env_file=None)

    assert exc_info.value.code == 1
    events = _events(logs)
    assert "invalid environment configuration" in events
    assert f"  - {field}:" in events
    assert "please check your .env file" in events
    assert all(entry["log_level"] == "error" for entry in logs)


def test_every_violation_is_reported(clean_env: pytest.MonkeyPatch):
    clean_env.setenv("PORT", "abc")
    clean_env.setenv("JWT_SECRET", "short")
    clean_env.setenv("NODE_ENV", "staging")

    with capture_logs() as logs, pytest.raises(SystemExit):
        load_config(env_file=None)

    violations = [
        entry["event"] for entry in logs if entry["event"].startswith("  - ")
    ]
    assert len(violations) == 4
    events = _events(logs)
    for field in ("port", "mongo_uri", "jwt_secret", "node_env"):
        assert f"  - {field}:" in events
    assert "jwt_secret must be at least 32 characters for security" in events
    assert "port must contain digits only" in events


def test_env_file_supplies_missing_values(
    clean_env: pytest.MonkeyPatch, tmp_path: Path
):
    env_file = tmp_path / ".env"
    env_file.write_text(
        f"PORT=7000\nMONGO_URI=mongodb://from-file\nJWT_SECRET={VALID_SECRET}\n",
        encoding="utf-8",
    )
    clean_env.setenv("PORT", "9000")

    settings = load_config(env_file=env_file)

    # Process environment wins over the override file
    assert settings.port == 9000
    assert settings.database_url == "mongodb://from-file"


def test_missing_env_file_is_ignored(clean_env: pytest.MonkeyPatch, tmp_path: Path):
    clean_env.setenv("MONGO_URI", "mongodb://x")
    clean_env.setenv("JWT_SECRET", VALID_SECRET)

    settings = load_config(env_file=tmp_path / "does-not-exist.env")

    assert settings.port == 5000


def test_settings_are_immutable(settings: Settings):
    with pytest.raises(ValidationError):
        settings.port = 1234  # type: ignore[misc]


def test_describe_settings_redacts_secrets():
    settings = Settings.model_validate(
        {
            "MONGO_URI": "postgresql://app:hunter2@db:5432/app",
            "JWT_SECRET": VALID_SECRET,
        }
    )

    described = describe_settings(settings)

    assert described["jwt_secret"] == "[REDACTED]"
    assert "hunter2" not in described["database_url"]
    assert described["port"] == "5000"
    assert described["node_env"] == "development"
