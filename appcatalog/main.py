"""
App Catalog - Main Application
Catalog CRUD, admin session auth and the health-check proxy
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from appcatalog import __version__
from appcatalog.config import Settings, load_settings
from appcatalog.routes import apps, auth, config, pages, proxy
from appcatalog.utils.database import CatalogDatabase
from appcatalog.utils.dependencies import LoginRequired
from appcatalog.utils.health_client import HealthProxyClient
from appcatalog.utils.sessions import (
    SessionManager,
    SessionMiddleware,
    SessionStore,
    build_session_store,
)


logger = structlog.get_logger(__name__)


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structured logging"""
    logging.basicConfig(level=log_level.upper(), format="%(message)s")
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events"""
    logger.info("Starting App Catalog")

    try:
        await app.state.db.initialize()
        logger.info("Database connection initialized")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    await app.state.health_client.start()

    yield

    await app.state.health_client.stop()
    await app.state.session_manager.store.close()
    await app.state.db.close()
    logger.info("App Catalog shutdown complete")


def create_application(
    settings: Optional[Settings] = None,
    database: Optional[CatalogDatabase] = None,
    session_store: Optional[SessionStore] = None,
    health_client: Optional[HealthProxyClient] = None,
) -> FastAPI:
    """Build the FastAPI application; collaborators not given are built from settings"""
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)

    if database is None:
        database = CatalogDatabase(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )
    if session_store is None:
        session_store = build_session_store(settings)
    if health_client is None:
        health_client = HealthProxyClient(timeout=settings.health_proxy_timeout)

    session_manager = SessionManager(
        session_store,
        settings.session_secret,
        cookie_name=settings.session_cookie_name,
        max_age=settings.session_max_age,
    )

    app = FastAPI(
        title=settings.app_name,
        description="Catalog of monitored applications with an admin panel",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = database
    app.state.health_client = health_client
    app.state.session_manager = session_manager

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all incoming requests"""
        response = await call_next(request)
        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code
        )
        return response

    app.add_middleware(SessionMiddleware, manager=session_manager)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning("Request validation failed", path=request.url.path, errors=details)
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": details},
        )

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        return RedirectResponse(url=exc.login_path, status_code=302)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            method=request.method,
            path=request.url.path,
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )

    # Register routes
    app.include_router(apps.router, prefix="/api/apps", tags=["Apps"])
    app.include_router(config.router, tags=["Config"])
    app.include_router(proxy.router, tags=["Health Proxy"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(pages.router, tags=["Pages"])

    @app.get("/health")
    async def health_check():
        """Service health check"""
        db_status = "connected" if getattr(app.state.db, "pool", None) else "disconnected"
        return {
            "status": "healthy",
            "service": "appcatalog",
            "version": __version__,
            "database": db_status
        }

    return app
