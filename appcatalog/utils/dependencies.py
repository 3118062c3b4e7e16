"""
FastAPI Dependencies
Application-scoped services and the admin Auth Gate
"""

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request, status

from appcatalog.config import Settings
from appcatalog.utils.database import CatalogDatabase
from appcatalog.utils.health_client import HealthProxyClient
from appcatalog.utils.sessions import Session, SessionManager

logger = structlog.get_logger(__name__)


class LoginRequired(Exception):
    """Unauthenticated browser request; rendered as a redirect to the login page"""

    def __init__(self, login_path: str = "/login"):
        super().__init__(login_path)
        self.login_path = login_path


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> CatalogDatabase:
    """Dependency to get database instance"""
    return request.app.state.db


def get_health_client(request: Request) -> HealthProxyClient:
    return request.app.state.health_client


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_session(request: Request) -> Session:
    """Session loaded by SessionMiddleware (empty if the middleware did not run)"""
    session = getattr(request.state, "session", None)
    if session is None:
        session = Session()
        request.state.session = session
    return session


async def require_admin(request: Request) -> Session:
    """
    Allow only requests whose session is authenticated

    Raises:
        HTTPException: 401 when the client accepts JSON
        LoginRequired: for every other client
    """
    session = get_session(request)
    if session.authenticated:
        return session

    accept = request.headers.get("accept", "")
    if "application/json" in accept:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access. Please log in.",
        )

    logger.info("Redirecting unauthenticated request", path=request.url.path)
    raise LoginRequired()


# Type aliases for cleaner dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
DatabaseDep = Annotated[CatalogDatabase, Depends(get_database)]
HealthClientDep = Annotated[HealthProxyClient, Depends(get_health_client)]
SessionManagerDep = Annotated[SessionManager, Depends(get_session_manager)]
CurrentSession = Annotated[Session, Depends(get_session)]
AdminSession = Annotated[Session, Depends(require_admin)]
