"""FastAPI MCP server for the UNX course catalog."""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings
from .config import settings as default_settings
from .engine import build_registry
from .mcp.auth import AuthGuard
from .mcp.dispatcher import ProtocolDispatcher
from .mcp.transport import SessionRegistry
from .mcp.transport import router as mcp_router
from .middleware import SecurityHeadersMiddleware
from .models import HealthResponse, ReadyResponse
from .repository import CourseRepository, GuardedRepository, PrismaCourseRepository

logger = logging.getLogger(__name__)

# ============ SENTRY INITIALIZATION ============


def _filter_sentry_event(event: dict) -> dict:
    """Remove credentials from Sentry events."""
    if "request" in event and "headers" in event["request"]:
        headers = event["request"]["headers"]
        for key in ["authorization", "x-api-key"]:
            if key in headers:
                headers[key] = "[REDACTED]"
    if "request" in event and "query_string" in event["request"]:
        if "api_key=" in str(event["request"]["query_string"]):
            event["request"]["query_string"] = "[REDACTED]"
    return event


def init_sentry(settings: Settings) -> None:
    if not settings.sentry_dsn:
        logger.debug("Sentry DSN not configured - error tracking disabled")
        return
    try:
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.starlette import StarletteIntegration
    except ImportError:
        logger.warning("Sentry DSN configured but sentry-sdk not installed")
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.environment == "production" else 1.0,
        integrations=[
            FastApiIntegration(),
            StarletteIntegration(),
        ],
        before_send=lambda event, hint: _filter_sentry_event(event),
    )
    logger.info("Sentry error tracking initialized")


# ============ APPLICATION ============


def create_app(
    repository: CourseRepository | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        repository: Catalog repository. When omitted, a Prisma-backed
            repository is connected at startup and closed at shutdown.
        settings: Settings override (defaults to the environment)
    """
    settings = settings or default_settings
    owns_db = repository is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting UNX MCP server v{__version__}")

        if not settings.debug and settings.cors_allowed_origins == "*":
            logger.warning(
                "SECURITY WARNING: CORS is configured to allow all origins ('*'). "
                "Set CORS_ALLOWED_ORIGINS to specific domains in production."
            )

        inner = repository
        if owns_db:
            from .db import get_db, mark_stale

            await get_db()  # Fail fast if the database is unreachable
            inner = PrismaCourseRepository(get_db, on_failure=mark_stale)

        guarded = GuardedRepository(inner, timeout=settings.repository_timeout_seconds)
        app.state.settings = settings
        app.state.repository = guarded
        app.state.sessions = SessionRegistry(max_pending=settings.sse_max_pending_messages)
        app.state.dispatcher = ProtocolDispatcher(
            registry=build_registry(settings),
            repository=guarded,
            guard=AuthGuard(settings.mcp_api_key),
            settings=settings,
        )

        yield

        if owns_db:
            from .db import close_db

            await close_db()

    app = FastAPI(
        title="UNX MCP Server",
        description="MCP endpoint exposing the UNX course catalog to conversational agents",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(SecurityHeadersMiddleware, hsts=not settings.debug)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    )

    app.include_router(mcp_router)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred. Please try again."},
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Liveness check."""
        return HealthResponse(status="healthy", version=__version__, timestamp=datetime.now(UTC))

    @app.get("/ready", tags=["Health"])
    async def readiness_check(request: Request):
        """Readiness check - verifies the catalog is reachable."""
        checks: dict[str, bool] = {}
        try:
            await request.app.state.repository.ping()
            checks["database"] = True
        except Exception as e:
            logger.warning(f"Readiness check failed: {e}")
            checks["database"] = False

        all_ok = all(checks.values())
        response = ReadyResponse(
            status="ready" if all_ok else "not_ready",
            version=__version__,
            checks=checks,
        )
        return JSONResponse(
            content=response.model_dump(mode="json"),
            status_code=200 if all_ok else 503,
        )

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "name": "UNX MCP Server",
            "version": __version__,
            "mcp": "/mcp",
            "sse": "/sse",
            "health": "/health",
        }

    return app


init_sentry(default_settings)
app = create_app()


# ============ MAIN ============


def main():
    """Run the server with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=default_settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "unx_mcp.server:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )


if __name__ == "__main__":
    main()
