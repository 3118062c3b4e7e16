"""
Database utilities for the app catalog
"""

from typing import List, Optional

import asyncpg
import structlog
from asyncpg import Pool

from appcatalog.models.app import App, AppPayload


logger = structlog.get_logger(__name__)


CREATE_APPS_TABLE = """
    CREATE TABLE IF NOT EXISTS apps (
        id SERIAL PRIMARY KEY,
        title TEXT NOT NULL,
        url TEXT NOT NULL,
        image TEXT,
        healthpath TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""


class CatalogDatabase:
    """Database connection and operations for the apps table"""

    def __init__(self, dsn: str, min_size: int = 1, max_size: int = 10):
        self.pool: Optional[Pool] = None
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size

    async def initialize(self):
        """Initialize connection pool and create the apps table if absent"""
        try:
            self.pool = await asyncpg.create_pool(
                dsn=self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
            )
            logger.info("Database pool created", min_size=self.min_size, max_size=self.max_size)

            async with self.pool.acquire() as conn:
                await conn.execute('SELECT 1')
                await conn.execute(CREATE_APPS_TABLE)
            logger.info("Table 'apps' ready")

        except Exception as e:
            logger.error("Failed to initialize database", error=str(e))
            raise

    async def close(self):
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")

    def _require_pool(self) -> Pool:
        if not self.pool:
            raise RuntimeError("Database pool not initialized")
        return self.pool

    # ===== APP OPERATIONS =====

    async def list_apps(self) -> List[App]:
        """Return all apps, newest first"""
        async with self._require_pool().acquire() as conn:
            try:
                rows = await conn.fetch("SELECT * FROM apps ORDER BY created_at DESC")
                return [App(**dict(row)) for row in rows]

            except Exception as e:
                logger.error("Failed to list apps", error=str(e))
                raise

    async def create_app(self, payload: AppPayload) -> App:
        """Insert a new app and return the stored row"""
        async with self._require_pool().acquire() as conn:
            try:
                row = await conn.fetchrow("""
                    INSERT INTO apps (title, url, image, healthpath)
                    VALUES ($1, $2, $3, $4)
                    RETURNING *
                """,
                    payload.title,
                    payload.url,
                    payload.image,
                    payload.healthpath
                )

                logger.info("App created", app_id=row['id'], title=payload.title)
                return App(**dict(row))

            except Exception as e:
                logger.error("Failed to create app", title=payload.title, error=str(e))
                raise

    async def update_app(self, app_id: int, payload: AppPayload) -> Optional[App]:
        """Replace the editable fields of an app; None when the id is unknown"""
        async with self._require_pool().acquire() as conn:
            try:
                row = await conn.fetchrow("""
                    UPDATE apps
                    SET title = $1, url = $2, image = $3, healthpath = $4
                    WHERE id = $5
                    RETURNING *
                """,
                    payload.title,
                    payload.url,
                    payload.image,
                    payload.healthpath,
                    app_id
                )
                if row is None:
                    return None

                logger.info("App updated", app_id=app_id)
                return App(**dict(row))

            except Exception as e:
                logger.error("Failed to update app", app_id=app_id, error=str(e))
                raise

    async def delete_app(self, app_id: int) -> Optional[App]:
        """Delete an app and return the removed row; None when the id is unknown"""
        async with self._require_pool().acquire() as conn:
            try:
                row = await conn.fetchrow(
                    "DELETE FROM apps WHERE id = $1 RETURNING *",
                    app_id
                )
                if row is None:
                    return None

                logger.info("App deleted", app_id=app_id)
                return App(**dict(row))

            except Exception as e:
                logger.error("Failed to delete app", app_id=app_id, error=str(e))
                raise
