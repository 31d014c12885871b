"""Integration tests for the SQL share repository on SQLite."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import SharedItinerary
from backend.app.db.sql_repositories import SqlShareRepository

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_create_and_get_share(sqlite_session: AsyncSession) -> None:
    """Test a stored share round-trips markdown and payload."""
    repo = SqlShareRepository(sqlite_session)
    payload = {"params": {"city": "부산", "nights": 2}, "places": [{"name": "해운대"}]}

    created = await repo.create_share("## Day 1 - 바다", payload, ttl_days=30, now=NOW)
    fetched = await repo.get_share(created.id, NOW + timedelta(days=1))

    assert fetched is not None
    assert fetched.markdown == "## Day 1 - 바다"
    assert fetched.payload == payload
    assert fetched.delete_token == created.delete_token


@pytest.mark.asyncio
async def test_expired_share_is_hidden(sqlite_session: AsyncSession) -> None:
    """Test a share is not returned once its expiry has passed."""
    repo = SqlShareRepository(sqlite_session)

    created = await repo.create_share("a", {}, ttl_days=1, now=NOW)

    assert await repo.get_share(created.id, NOW + timedelta(hours=23)) is not None
    assert await repo.get_share(created.id, NOW + timedelta(days=1, seconds=1)) is None


@pytest.mark.asyncio
async def test_soft_delete(sqlite_session: AsyncSession) -> None:
    """Test delete marks the row instead of removing it."""
    repo = SqlShareRepository(sqlite_session)
    created = await repo.create_share("a", {}, ttl_days=30, now=NOW)

    assert await repo.delete_share(created.id, "wrong-token", NOW) is False
    assert await repo.delete_share(created.id, created.delete_token, NOW) is True
    assert await repo.delete_share(created.id, created.delete_token, NOW) is False

    assert await repo.get_share(created.id, NOW) is None
    stmt = (
        select(SharedItinerary)
        .where(SharedItinerary.id == created.id)
        .execution_options(populate_existing=True)
    )
    row = (await sqlite_session.execute(stmt)).scalar_one()
    assert row.deleted_at is not None


@pytest.mark.asyncio
async def test_get_missing_share(sqlite_session: AsyncSession) -> None:
    """Test an unknown id returns None."""
    assert await SqlShareRepository(sqlite_session).get_share("missing", NOW) is None
