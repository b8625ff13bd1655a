"""Happy Thoughts API - FastAPI Application."""

import time
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from happy_thoughts import __version__
from happy_thoughts.boot import Bootloader, BootMode
from happy_thoughts.config import Settings
from happy_thoughts.database import Database
from happy_thoughts.logger import configure_logging, get_logger
from happy_thoughts.rate_limit import build_rate_limiters
from happy_thoughts.routers import auth, thoughts
from happy_thoughts.security import PasswordHasher, TokenIssuer
from happy_thoughts.utils.exceptions import ApiError

logger = get_logger(__name__)

API_TITLE = "Happy Thoughts API"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - validate environment and init DB on startup."""
    database: Database = app.state.db
    # Exits the process if config or DB connectivity is broken
    await Bootloader(app.state.settings, database).validate(mode=BootMode.CRITICAL)
    await database.init_db()
    logger.info("Application started", version=__version__)
    yield
    app.state.login_rate_limiter.close()
    app.state.signup_rate_limiter.close()
    await database.dispose()
    logger.info("Application shutting down")


def _error_body(error: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": error}
    if details is not None:
        body["details"] = details
    body["request_id"] = structlog.contextvars.get_contextvars().get("request_id")
    return body


def list_endpoints(app: FastAPI) -> list[dict[str, Any]]:
    """Collect ``{"path", "methods"}`` for every documented route, grouped by path."""
    paths: dict[str, dict[str, Any]] = app.openapi().get("paths", {})
    return [
        {"path": path, "methods": sorted(method.upper() for method in operations)}
        for path, operations in paths.items()
    ]


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error, exc.details),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content=_error_body("Validation failed", details))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler to ensure JSON response."""
        # Only show exception details in DEBUG mode
        if settings.debug:
            details = {"message": str(exc), "trace": traceback.format_exc()}
        else:
            details = None
        return JSONResponse(
            status_code=500,
            content=_error_body("An internal server error occurred. Please try again later.", details),
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around one explicit Settings instance."""
    settings = settings or Settings()
    configure_logging(debug=settings.debug)

    app = FastAPI(
        title=API_TITLE,
        description="Post, like and manage short happy thoughts",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = Database(settings.database_url, echo=settings.debug)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_issuer = TokenIssuer(
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
    )
    app.state.login_rate_limiter, app.state.signup_rate_limiter = build_rate_limiters(settings)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next: Any) -> Response:
        """Middleware to inject Request-ID and log request details."""
        request_id = request.headers.get("X-Request-ID", str(uuid4()))

        # Clear and set contextvars for this request
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            duration = time.perf_counter() - start_time
            logger.exception(
                "HTTP Request Failed",
                duration_ms=round(duration * 1000, 2),
                error=str(exc),
            )
            raise

        duration = time.perf_counter() - start_time
        logger.info(
            "HTTP Request",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )
        response.headers["X-Request-ID"] = request_id
        return response

    _register_exception_handlers(app, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    app.include_router(auth.router)
    app.include_router(thoughts.router)

    @app.get("/")
    async def root() -> dict[str, Any]:
        """API name plus every available endpoint."""
        return {"message": f"Welcome to the {API_TITLE}!", "endpoints": list_endpoints(app)}

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Report database (and Redis, when configured) reachability.

        Returns 200 if all critical services are healthy, 503 otherwise.
        """
        boot = Bootloader(settings, app.state.db)
        db_res = await boot.check_database()
        redis_res = await boot.check_redis()
        checks = {
            "database": db_res.status == "ok",
            "redis": redis_res.status in ("ok", "skipped"),
        }
        all_healthy = all(checks.values())
        return JSONResponse(
            status_code=200 if all_healthy else 503,
            content={
                "status": "healthy" if all_healthy else "unhealthy",
                "timestamp": datetime.now(UTC).isoformat(),
                "checks": checks,
                "version": __version__,
            },
        )

    return app
