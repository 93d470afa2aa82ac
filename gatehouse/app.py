from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from .auth_routes import router as auth_router
from .config import Settings
from .constants import AUTH_PREFIX, ENTRY_PAGE
from .error_handlers import handle_domain_error
from .exceptions import GatehouseError
from .middleware import log_requests_middleware
from .telemetry import setup_telemetry

APP_NAME = "Gatehouse"
APP_VERSION = "0.1.0"


def create_app(settings: Settings) -> FastAPI:
    """Assemble the application for the given settings.

    The database engine is attached later as ``app.state.engine`` by the
    server bootstrap, once the connection has been proven.
    """
    app = FastAPI(
        title=APP_NAME,
        version=APP_VERSION,
        debug=settings.is_development,
    )
    app.state.settings = settings

    # Add middleware (the last one added runs first, so CORS is outermost)
    app.middleware("http")(log_requests_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(
        GatehouseError,
        handle_domain_error,  # type: ignore[arg-type]
    )

    app.include_router(auth_router, prefix=AUTH_PREFIX, tags=["auth"])

    entry_page = settings.static_dir / ENTRY_PAGE

    @app.get("/", include_in_schema=False)
    async def index() -> FileResponse:
        return FileResponse(entry_page)

    setup_telemetry(app, settings)

    # Mounted last so it only sees paths no route claimed
    app.mount("/", StaticFiles(directory=settings.static_dir), name="static")

    return app
