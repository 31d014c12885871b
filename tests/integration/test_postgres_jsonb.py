"""PostgreSQL-specific integration test for the JSONB payload column.

This test requires a real PostgreSQL instance (SQLite stores the payload as
plain JSON text).

Run with: DATABASE_URL='postgresql://...' pytest -m postgres
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import SharedItinerary
from backend.app.db.sql_repositories import SqlShareRepository


@pytest.mark.postgres
@pytest.mark.asyncio
async def test_jsonb_payload_storage(postgres_session: AsyncSession) -> None:
    """Test that the payload JSONB column stores nested data in PostgreSQL."""
    repo = SqlShareRepository(postgres_session)
    payload = {
        "params": {"country": "대한민국", "city": "서울", "nights": 3, "travelStyles": ["휴식"]},
        "places": [{"name": "경복궁", "dayNum": 1, "lat": 37.5796, "lon": 126.977}],
    }

    created = await repo.create_share(
        "## Day 1 - 궁궐", payload, ttl_days=30, now=datetime.now(timezone.utc)
    )

    result = await postgres_session.execute(
        select(SharedItinerary).where(SharedItinerary.id == created.id)
    )
    row = result.scalar_one()

    assert row.payload["params"]["city"] == "서울"
    assert row.payload["places"][0]["lat"] == 37.5796
    assert row.expires_at is not None
    assert row.expires_at.tzinfo is not None
