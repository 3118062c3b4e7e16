"""
Tests against a real PostgreSQL server

Run with TEST_DATABASE_URL pointing at a disposable database; the apps table is dropped first.
"""

import os
from datetime import datetime

import pytest
import pytest_asyncio

from appcatalog.models.app import AppPayload
from appcatalog.utils.database import CatalogDatabase

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

pytestmark = pytest.mark.skipif(not TEST_DATABASE_URL, reason="TEST_DATABASE_URL not set")


@pytest_asyncio.fixture
async def live_db():
    database = CatalogDatabase(TEST_DATABASE_URL)
    await database.initialize()
    async with database.pool.acquire() as conn:
        await conn.execute("DROP TABLE IF EXISTS apps")
    await database.close()

    await database.initialize()
    try:
        yield database
    finally:
        await database.close()


@pytest.mark.asyncio
async def test_ids_increase_and_round_trip(live_db):
    async with live_db.pool.acquire() as conn:
        started = await conn.fetchval("SELECT CURRENT_TIMESTAMP::timestamp")

    first = await live_db.create_app(AppPayload(title="One", url="https://one.example.com"))
    second = await live_db.create_app(
        AppPayload(title="Two", url="https://two.example.com", image="i.png", healthpath="https://two.example.com/h")
    )

    assert second.id > first.id
    listed = await live_db.list_apps()
    assert [app.id for app in listed] == [second.id, first.id]
    assert listed[0].image == "i.png"
    assert listed[0].healthpath == "https://two.example.com/h"
    assert isinstance(listed[0].created_at, datetime)
    assert listed[0].created_at >= started


@pytest.mark.asyncio
async def test_update_and_delete(live_db):
    app = await live_db.create_app(AppPayload(title="Old", url="https://old.example.com"))

    updated = await live_db.update_app(app.id, AppPayload(title="New", url="https://new.example.com"))
    assert updated.title == "New"
    assert updated.created_at == app.created_at

    assert (await live_db.delete_app(app.id)).id == app.id
    assert await live_db.delete_app(app.id) is None
    assert await live_db.update_app(app.id, AppPayload(title="X", url="https://x.example.com")) is None
