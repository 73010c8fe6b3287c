"""FastAPI application server.

This module contains the application factory and the Uvicorn runner.
"""

from typing import Any, Optional

from fastapi import FastAPI  # type: ignore[import-untyped]
from fastapi.responses import JSONResponse  # type: ignore[import-untyped]

from time_manager import __version__
from time_manager.api.middleware import setup_middleware
from time_manager.api.models import ErrorResponse
from time_manager.core.clock import ClockService
from time_manager.core.config import ConfigManager, Settings, setup_logging
from time_manager.core.reports import ReportService
from time_manager.core.storage import StorageManager

# Documented error payloads of authenticated routers
ERROR_RESPONSES: dict[int, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409)
}


def create_app(
    config: Optional[ConfigManager] = None, settings: Optional[Settings] = None
) -> FastAPI:
    """Create and configure FastAPI application.

    The configuration is frozen into :class:`Settings` here, once; request
    handling only ever sees that snapshot.

    Args:
        config: Optional configuration manager (creates default if None)
        settings: Pre-built settings, taking precedence over ``config``

    Returns:
        Configured FastAPI application instance

    Example:
        >>> app = create_app()
        >>> # Or with custom config
        >>> app = create_app(ConfigManager(Path("config.yml")))
    """
    if settings is None:
        settings = Settings.from_config(config or ConfigManager())

    setup_logging(settings)

    app = FastAPI(
        title="Time Manager API",
        description="Clock-in/clock-out tracking with team and hours reports",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    storage = StorageManager(settings.data_dir)
    app.state.settings = settings
    app.state.storage = storage
    app.state.clock_service = ClockService(storage)
    app.state.report_service = ReportService(storage)

    setup_middleware(app, settings)

    from time_manager.api.endpoints import auth, clocks, reports, system, teams, users

    app.include_router(system.router, prefix="/api", tags=["system"])
    app.include_router(
        auth.router, prefix="/api/auth", tags=["auth"], responses=ERROR_RESPONSES
    )
    app.include_router(
        users.router, prefix="/api/users", tags=["users"], responses=ERROR_RESPONSES
    )
    app.include_router(
        teams.router, prefix="/api/teams", tags=["teams"], responses=ERROR_RESPONSES
    )
    app.include_router(
        clocks.router, prefix="/api/clocks", tags=["clocks"], responses=ERROR_RESPONSES
    )
    app.include_router(
        reports.router, prefix="/api/reports", tags=["reports"], responses=ERROR_RESPONSES
    )

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Root endpoint - points at docs and health."""
        return JSONResponse(
            {
                "message": "Time Manager API",
                "version": __version__,
                "docs": "/docs",
                "health": "/api/health",
            }
        )

    return app


def run_server(
    config: Optional[ConfigManager] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: bool = False,
) -> None:
    """Run the API server using Uvicorn.

    Args:
        config: Optional configuration manager
        host: Host address to bind to (default: from config)
        port: Port number to bind to (default: from config)
        reload: Enable auto-reload for development

    Note:
        This function blocks until the server is stopped. Auto-reload
        re-imports the app factory and therefore always reads the default
        config file.
    """
    import uvicorn  # type: ignore[import-untyped]

    settings = Settings.from_config(config or ConfigManager())

    uvicorn_config = {
        "host": host or settings.host,
        "port": port or settings.port,
        "log_level": settings.log_level.lower(),
        "access_log": settings.access_log,
    }

    if reload:
        uvicorn.run(
            "time_manager.api.server:create_app", factory=True, reload=True, **uvicorn_config
        )
    else:
        uvicorn.run(create_app(settings=settings), **uvicorn_config)
