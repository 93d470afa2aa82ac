"""Server bootstrap: database first, then the listening socket.

Every failure on this path is fatal. `run` returns the process exit status
instead of exiting itself so the sequence can be driven from tests.
"""

import asyncio
import socket
from collections.abc import Callable
from typing import Any, Final, Protocol

import uvicorn
from sqlalchemy.future import Engine

from .app import create_app
from .config import Settings
from .database import connect_database
from .logging_config import get_logger

logger: Final = get_logger(__name__)


class ServerLike(Protocol):
    should_exit: bool

    async def serve(self, sockets: list[socket.socket] | None = None) -> None: ...


def announce_listening(settings: Settings) -> None:
    logger.info(f"Server running on http://localhost:{settings.port}")
    logger.info(f"Environment: {settings.node_env.value}")


class GatehouseServer(uvicorn.Server):
    """uvicorn server that reports once its sockets are bound."""

    def __init__(self, config: uvicorn.Config, settings: Settings) -> None:
        super().__init__(config)
        self.settings = settings

    async def startup(self, sockets: list[socket.socket] | None = None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            announce_listening(self.settings)


class TaskSupervisor:
    """Treats any task failure nobody awaited as fatal for the process.

    Installed as the event loop's exception handler. The first failure asks
    the server to shut down; `failed` then tells the caller to exit non-zero.
    """

    def __init__(self, server: ServerLike) -> None:
        self.server = server
        self.failed = False

    def handle_exception(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        exception = context.get("exception")
        if exception is None:
            loop.default_exception_handler(context)
            return

        logger.error(
            "Unhandled task failure",
            error=str(exception),
            error_type=type(exception).__name__,
            context=context.get("message"),
        )
        self.failed = True
        self.server.should_exit = True


ServerFactory = Callable[[uvicorn.Config, Settings], ServerLike]


async def serve(
    settings: Settings,
    *,
    connect: Callable[[str], Engine] = connect_database,
    server_factory: ServerFactory = GatehouseServer,
) -> int:
    app = create_app(settings)

    try:
        engine = await asyncio.to_thread(connect, settings.database_url)
    except Exception as e:
        logger.error("Database connection error", error=str(e))
        return 1

    logger.info("Connected to database")
    app.state.engine = engine

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
    server = server_factory(config, settings)

    supervisor = TaskSupervisor(server)
    asyncio.get_running_loop().set_exception_handler(supervisor.handle_exception)

    try:
        await server.serve()
    finally:
        engine.dispose()

    if supervisor.failed:
        return 1
    return 0


def run(
    settings: Settings,
    *,
    connect: Callable[[str], Engine] = connect_database,
    server_factory: ServerFactory = GatehouseServer,
) -> int:
    """Connect the database, then serve until shutdown.

    Returns:
        0 after a clean shutdown, 1 if the database is unreachable or a task
        failed without anyone awaiting it
    """
    return asyncio.run(
        serve(settings, connect=connect, server_factory=server_factory)
    )
