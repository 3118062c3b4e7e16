"""
Admin login and logout routes
"""

import secrets

import structlog
from fastapi import APIRouter, HTTPException, status

from appcatalog.models.app import LoginRequest
from appcatalog.utils.dependencies import CurrentSession, SessionManagerDep, SettingsDep

logger = structlog.get_logger(__name__)

router = APIRouter()


def _matches(provided, expected: str) -> bool:
    if provided is None:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


@router.post("/login")
async def login(
    credentials: LoginRequest,
    session: CurrentSession,
    manager: SessionManagerDep,
    settings: SettingsDep,
):
    """Authenticate against the configured admin pair"""
    if not (
        _matches(credentials.username, settings.admin_username)
        and _matches(credentials.password, settings.admin_password)
    ):
        logger.warning("Login failed", username=credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
        )

    try:
        await manager.login(session, credentials.username)
    except Exception as e:
        logger.error("Failed to save session", error=str(e))
        raise HTTPException(status_code=500, detail="Login failed")

    logger.info("Admin logged in", username=credentials.username)
    return {"message": "Login successful!"}


@router.get("/logout")
async def logout(session: CurrentSession, manager: SessionManagerDep):
    """Destroy the current session"""
    try:
        await manager.destroy(session)
    except Exception as e:
        logger.error("Failed to destroy session", error=str(e))
        raise HTTPException(status_code=500, detail="Logout failed")

    return {"message": "Logged out successfully."}
