import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient
from rich.logging import RichHandler

from gatehouse.app import create_app
from gatehouse.config import Settings
from gatehouse.database import connect_database

TEST_SECRET = "s" * 32

ENV_VARS = (
    "PORT",
    "HOST",
    "MONGO_URI",
    "DATABASE_URL",
    "JWT_SECRET",
    "JWT_ALGORITHM",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
    "NODE_ENV",
    "STATIC_DIR",
    "ENABLE_TELEMETRY",
)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo whatever setup_logging did to the root logger and structlog."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every variable the settings read from the process environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "static"
    directory.mkdir()
    (directory / "index.html").write_text(
        "<!doctype html><title>Gatehouse</title><h1>Sign in</h1>",
        encoding="utf-8",
    )
    (directory / "styles.css").write_text("body { margin: 0; }", encoding="utf-8")
    return directory


@pytest.fixture
def settings(static_dir: Path) -> Settings:
    # model_validate skips the environment and .env sources entirely
    return Settings.model_validate(
        {
            "MONGO_URI": "sqlite://",
            "JWT_SECRET": TEST_SECRET,
            "NODE_ENV": "test",
            "STATIC_DIR": str(static_dir),
        }
    )


@pytest.fixture
def app(settings: Settings) -> Iterator[FastAPI]:
    application = create_app(settings)
    engine = connect_database(settings.database_url)
    application.state.engine = engine
    yield application
    engine.dispose()


@pytest.fixture(name="client")
def client_fixture(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client
