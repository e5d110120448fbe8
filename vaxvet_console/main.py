"""
VAXVET console application.

Creates the FastAPI app, wires the process-wide console state and runs it
with uvicorn.
"""

import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from loguru import logger

from .auth import LoginRequired
from .config import Settings, get_settings
from .routers import (
    auth_router,
    codes_router,
    dashboard_router,
    notifications_router,
    owners_router,
    pets_router,
    vaccine_records_router,
    vaccine_stocks_router,
    vaccines_router,
    veterinarians_router,
)
from .routers.dependencies import redirect
from .state import ConsoleState


def configure_logging(settings: Settings) -> None:
    """Replace loguru's default sink with one at the configured level."""
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=settings.log_level.upper())


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the console application.

    Args:
        settings: Settings to use (defaults to the global settings)
        transport: Optional httpx transport for the API clients

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    console = ConsoleState.create(settings, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("VAXVET console is starting up...")
        logger.info(f"Environment: {settings.environment}")
        logger.info(f"API base URL: {settings.api_base_url}")
        logger.info(f"Signed in: {'Yes' if console.auth.is_authenticated else 'No'}")

        if console.listener is not None:
            console.listener.start()

        yield

        await console.aclose()
        logger.info("VAXVET console shut down")

    app = FastAPI(
        title="VAXVET Console",
        description="Administrative console for the VAXVET clinic API",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.console = console

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        logger.debug(f"Unauthenticated request to {request.url.path}, redirecting to /login")
        return redirect("/login")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "vaxvet-console"}

    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(owners_router)
    app.include_router(pets_router)
    app.include_router(codes_router)
    app.include_router(vaccines_router)
    app.include_router(vaccine_stocks_router)
    app.include_router(vaccine_records_router)
    app.include_router(veterinarians_router)
    app.include_router(notifications_router)

    return app


def main() -> None:
    """Run the console with uvicorn."""
    settings = get_settings()
    configure_logging(settings)
    app = create_app(settings)
    logger.info(f"Open http://{settings.host}:{settings.port} in a browser")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


# Run with: vaxvet-console
if __name__ == "__main__":
    main()
