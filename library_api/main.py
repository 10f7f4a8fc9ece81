"""
FastAPI Application Entry Point

Key Concepts:
=============

1. Application Factory Pattern
   - create_app(settings) returns a configured app
   - Everything process-wide (engine, session factory, password hasher,
     token service) is built here from the Settings object and stored on
     app.state; tests pass their own Settings

2. Lifespan Events
   - startup: optionally create tables (development)
   - shutdown: dispose of the engine's connection pool

3. Middleware Stack
   - CORS: Allow cross-origin requests
   - SlowAPI: per-IP rate limiting
   - Request logging in debug mode

4. Exception Handlers
   - Every failure is rendered as {"success": false, "message": ...}
   - Expected errors come from library_api.exceptions
   - Database and unexpected errors are logged and reported as 500
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from library_api.config import Settings, get_settings
from library_api.database import build_engine, build_session_factory, create_tables
from library_api.exceptions import APIError
from library_api.routers import auth_router, authors_router, books_router
from library_api.services.rate_limiter import configure_limiter, rate_limit_exceeded_handler
from library_api.services.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    settings: Settings = app.state.settings

    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: {settings.environment}, debug: {settings.debug}")

    if settings.create_tables_on_startup:
        create_tables(app.state.engine)
        logger.info("Database tables created")

    if not settings.google_configured:
        logger.warning("Google OAuth not configured - /auth/google will answer 501")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")
    app.state.engine.dispose()


# =============================================================================
# Exception Handlers
# =============================================================================
def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Render every failure as the failure envelope."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Path or query values FastAPI itself could not convert."""
        errors = []
        for error in exc.errors():
            loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
            errors.append({"field": ".".join(loc), "message": error["msg"]})
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Validation failed", "errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == 404 and message == "Not Found":
            message = f"Route {request.url.path} not found"
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """Log the real error, hide it from the client."""
        logger.error(f"Database error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "A database error occurred"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        Outside production the exception text is included under "error".
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        content = {"success": False, "message": "An internal error occurred"}
        if not settings.is_production:
            content["error"] = str(exc)
        return JSONResponse(status_code=500, content=content)


# =============================================================================
# Application Factory
# =============================================================================
def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration; defaults to get_settings()
            (environment variables and .env)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    logging.basicConfig(level=getattr(logging, settings.log_level), format=LOG_FORMAT)

    app = FastAPI(
        title=settings.app_name,
        description="""
## Book Library API

A RESTful API for a book and author catalog.

### Features
- **Books**: CRUD, genre filter, search, sorting, pagination
- **Authors**: CRUD, nationality/active filters, search, sorting, pagination
- **Auth**: e-mail/password registration and login, Google sign-in

### Authentication
Send `Authorization: Bearer <token>` to create, update or delete catalog
entries and to manage your own profile. Reading the catalog is public.
        """,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Process-wide State
    # -------------------------------------------------------------------------
    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService.from_settings(settings)

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    app.state.limiter = configure_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.debug:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            response = await call_next(request)
            logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
            return response

    register_exception_handlers(app, settings)

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    # prefix="/api/v1" creates versioned URLs: /api/v1/books, /api/v1/authors
    api_prefix = f"/api/{settings.api_version}"

    app.include_router(books_router, prefix=api_prefix)
    app.include_router(authors_router, prefix=api_prefix)
    app.include_router(auth_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Service Endpoints
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
    )
    async def health_check() -> dict:
        """Used by load balancers and container probes."""
        return {
            "success": True,
            "status": "healthy",
            "app": settings.app_name,
            "environment": settings.environment,
            "version": settings.api_version,
            "rate_limiting": {
                "enabled": settings.rate_limit_enabled,
                "default_limit": settings.rate_limit_default,
            },
            "google_oauth": settings.google_configured,
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
    )
    async def root() -> dict:
        """Welcome message and endpoint map."""
        return {
            "success": True,
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "books": f"{api_prefix}/books",
                "authors": f"{api_prefix}/authors",
                "auth": f"{api_prefix}/auth",
            },
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn library_api.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# python -m library_api.main

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "library_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
