"""Main FastAPI application."""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import auth
from .assistant import routes as assistant_routes
from .assistant.providers import build_assistant
from .config import Settings, settings as default_settings
from .database import Database
from .errors import register_error_handlers
from .finance import routes as finance_routes
from .library import culture, quran
from .objectives import routes as objective_routes
from .reports import routes as report_routes
from .resources import routes as resource_routes
from .scheduler import daily_sweep_loop

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    """Configure root logging, mirroring to a file when one is configured."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings (defaults to the environment-loaded ones)

    Returns:
        Configured FastAPI app with its database and assistant on ``app.state``
    """
    settings = settings or default_settings
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweep = None
        if settings.reconcile_sweep_enabled:
            sweep = asyncio.create_task(daily_sweep_loop(app.state.db))
            logger.info("Daily reconciliation sweep scheduled")
        yield
        if sweep is not None:
            sweep.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweep

    app = FastAPI(
        title="Goaltrack",
        description="Personal objective tracking with progress reports and an AI coach",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = Database(settings.database_path)
    app.state.assistant = build_assistant(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(objective_routes.router)
    app.include_router(resource_routes.objective_resources)
    app.include_router(resource_routes.router)
    app.include_router(finance_routes.router)
    app.include_router(quran.router)
    app.include_router(culture.router)
    app.include_router(assistant_routes.router)
    app.include_router(report_routes.router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"message": "Goaltrack API", "version": "1.0.0"}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        create_app(),
        host=default_settings.server_host,
        port=default_settings.server_port,
        log_level=default_settings.log_level.lower(),
    )
