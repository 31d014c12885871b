"""SQL implementations of repository interfaces."""

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import SharedItinerary
from backend.app.db.repositories import (
    ShareRecord,
    new_delete_token,
    new_share_id,
    share_expiry,
)


def _to_record(row: SharedItinerary) -> ShareRecord:
    return ShareRecord(
        id=row.id,
        markdown=row.markdown,
        payload=row.payload,
        created_at=row.created_at,
        expires_at=row.expires_at,
        deleted_at=row.deleted_at,
        delete_token=row.delete_token,
    )


class SqlShareRepository:
    """SQL implementation of ShareRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_share(
        self, markdown: str, payload: dict[str, Any], *, ttl_days: int, now: datetime
    ) -> ShareRecord:
        """Store a new share."""
        row = SharedItinerary(
            id=new_share_id(),
            markdown=markdown,
            payload=payload,
            created_at=now,
            expires_at=share_expiry(now, ttl_days),
            delete_token=new_delete_token(),
        )
        record = _to_record(row)
        self._session.add(row)
        await self._session.commit()
        return record

    async def get_share(self, share_id: str, now: datetime) -> ShareRecord | None:
        """Get a visible share by ID."""
        stmt = select(SharedItinerary).where(
            SharedItinerary.id == share_id,
            SharedItinerary.deleted_at.is_(None),
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None

        record = _to_record(row)
        return record if record.is_visible(now) else None

    async def delete_share(self, share_id: str, delete_token: str, now: datetime) -> bool:
        """Soft-delete a share when the token matches."""
        stmt = (
            update(SharedItinerary)
            .where(
                SharedItinerary.id == share_id,
                SharedItinerary.delete_token == delete_token,
                SharedItinerary.deleted_at.is_(None),
            )
            .values(deleted_at=now)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return result.rowcount > 0
