from collections.abc import Generator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.future import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from . import models  # noqa: F401  (registers tables on SQLModel.metadata)

_MEMORY_SQLITE_URLS = {"sqlite://", "sqlite:///:memory:"}


def get_engine(database_url: str) -> Engine:
    connect_args: dict[str, bool] = {}
    engine_kwargs: dict[str, int | bool | type[StaticPool]] = {}

    # Configure connection args based on database type
    if "sqlite" in database_url:
        connect_args["check_same_thread"] = False
        if database_url in _MEMORY_SQLITE_URLS:
            # One shared connection, otherwise every checkout sees an empty db
            engine_kwargs["poolclass"] = StaticPool
    elif "postgresql" in database_url:
        engine_kwargs["pool_pre_ping"] = True
        engine_kwargs["pool_size"] = 10
        engine_kwargs["max_overflow"] = 20

    return create_engine(
        database_url,
        # echo=True,  # Enable for SQL debugging
        connect_args=connect_args,
        **engine_kwargs,
    )


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


def connect_database(database_url: str) -> Engine:
    """Create the engine, prove the database answers and create the schema.

    Raises whatever the driver raises when the URL is unusable or the server
    cannot be reached; the caller decides whether that is fatal.
    """
    engine = get_engine(database_url)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        init_db(engine)
    except Exception:
        engine.dispose()
        raise
    return engine


def get_session(request: Request) -> Generator[Session, None, None]:
    with Session(request.app.state.engine) as session:
        yield session
