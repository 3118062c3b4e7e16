"""
Catalog CRUD routes
"""

from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, HTTPException

from appcatalog.models.app import App, AppPayload
from appcatalog.utils.dependencies import AdminSession, DatabaseDep

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=List[App])
async def list_apps(db: DatabaseDep):
    """List all apps, newest first"""
    try:
        return await db.list_apps()
    except Exception as e:
        logger.error("Failed to list apps", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", response_model=App)
async def create_app(payload: AppPayload, db: DatabaseDep, session: AdminSession):
    """Create a new app"""
    try:
        app = await db.create_app(payload)
    except Exception as e:
        logger.error("Failed to create app", title=payload.title, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    logger.info("App created", app_id=app.id, user=session.user)
    return app


@router.put("/{app_id}", response_model=App)
async def update_app(app_id: int, payload: AppPayload, db: DatabaseDep, session: AdminSession):
    """Replace title, url, image and healthpath of an app"""
    try:
        app = await db.update_app(app_id, payload)
    except Exception as e:
        logger.error("Failed to update app", app_id=app_id, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    if app is None:
        raise HTTPException(status_code=404, detail="App not found")

    logger.info("App updated", app_id=app_id, user=session.user)
    return app


@router.delete("/{app_id}", response_model=Dict[str, Any])
async def delete_app(app_id: int, db: DatabaseDep, session: AdminSession):
    """Delete an app"""
    try:
        app = await db.delete_app(app_id)
    except Exception as e:
        logger.error("Failed to delete app", app_id=app_id, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    if app is None:
        raise HTTPException(status_code=404, detail="App not found")

    logger.info("App deleted", app_id=app_id, user=session.user)
    return {"message": "App deleted", "removedApp": app}
