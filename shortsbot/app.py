"""FastAPI application factory"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from shortsbot.core.config import Settings, get_settings
from shortsbot.core.dependencies import ServiceContainer, build_container, create_store
from shortsbot.core.errors import ShortsBotError
from shortsbot.core.logging import setup_logging
from shortsbot.routers import auth_router, channel_router, setup_router, videos_router

logger = logging.getLogger(__name__)

# Track server start time
_start_time: float = 0.0


def create_app(
    settings: Settings | None = None,
    container: ServiceContainer | None = None,
) -> FastAPI:
    """Create and configure FastAPI application

    A prebuilt *container* (tests) is used as is; otherwise one is built from
    *settings* when the app starts.
    """
    settings = settings or (container.settings if container else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Handle startup and shutdown"""
        global _start_time
        _start_time = time.time()

        logger.info("Starting ShortsBot API server")
        logger.info(f"Environment: {settings.environment}")
        logger.info(f"OAuth redirect URI: {settings.redirect_uri}")

        if container is None:
            store = await create_store(settings)
            app.state.container = build_container(settings, store)
        else:
            app.state.container = container

        yield

        logger.info("Shutting down ShortsBot API server")
        try:
            await app.state.container.close()
        except Exception as e:
            logger.exception(f"Error during shutdown: {e}")

    if container is None:
        setup_logging(settings)

    app = FastAPI(
        title="ShortsBot API",
        description="YouTube Shorts script generation and scheduling backend",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(ShortsBotError)
    async def shortsbot_error_handler(request: Request, exc: ShortsBotError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse({"error": "Internal Server Error"}, status_code=500)

    app.include_router(setup_router.router)
    app.include_router(auth_router.router)
    app.include_router(videos_router.router)
    app.include_router(channel_router.router)

    @app.get("/")
    async def root():
        """Root endpoint - minimal service info"""
        return {"service": "shortsbot-api", "status": "running"}

    @app.get("/health")
    async def health():
        """Liveness check (no storage dependency)"""
        return {
            "status": "healthy",
            "uptime_seconds": int(time.time() - _start_time),
        }

    @app.get("/status")
    async def status(request: Request):
        """Readiness / status endpoint, includes a storage health check"""
        storage_ok = await request.app.state.container.store.check_health()
        return {
            "service": "shortsbot-api",
            "version": "1.0.0",
            "uptime_seconds": int(time.time() - _start_time),
            "storage_ok": storage_ok,
            "environment": settings.environment,
        }

    @app.api_route("/ping", methods=["GET", "HEAD"], response_class=PlainTextResponse)
    async def ping():
        """Ping endpoint"""
        return "pong"

    logger.info("FastAPI application configured")

    return app
