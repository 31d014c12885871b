"""In-memory implementations of repository interfaces."""

import secrets
from datetime import datetime
from typing import Any

from backend.app.db.repositories import (
    ShareRecord,
    new_delete_token,
    new_share_id,
    share_expiry,
)


class InMemoryShareRepository:
    """In-memory implementation of ShareRepository."""

    def __init__(self) -> None:
        self._shares: dict[str, ShareRecord] = {}

    async def create_share(
        self, markdown: str, payload: dict[str, Any], *, ttl_days: int, now: datetime
    ) -> ShareRecord:
        """Store a new share."""
        record = ShareRecord(
            id=new_share_id(),
            markdown=markdown,
            payload=dict(payload),
            created_at=now,
            expires_at=share_expiry(now, ttl_days),
            deleted_at=None,
            delete_token=new_delete_token(),
        )
        self._shares[record.id] = record
        return record

    async def get_share(self, share_id: str, now: datetime) -> ShareRecord | None:
        """Get a visible share by ID."""
        record = self._shares.get(share_id)
        if record is None or not record.is_visible(now):
            return None
        return record

    async def delete_share(self, share_id: str, delete_token: str, now: datetime) -> bool:
        """Soft-delete a share when the token matches."""
        record = self._shares.get(share_id)
        if record is None or record.deleted_at is not None:
            return False
        if not secrets.compare_digest(record.delete_token, delete_token):
            return False
        record.deleted_at = now
        return True
