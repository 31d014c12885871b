"""Repository protocol interfaces for data access."""

import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol


@dataclass
class ShareRecord:
    """Shared itinerary data record."""

    id: str
    markdown: str
    payload: dict[str, Any]
    created_at: datetime
    expires_at: datetime | None
    deleted_at: datetime | None
    delete_token: str

    def is_visible(self, now: datetime) -> bool:
        """Not soft-deleted and not past its expiry."""
        if self.deleted_at is not None:
            return False
        return self.expires_at is None or _as_utc(self.expires_at) > _as_utc(now)


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes for timezone-aware columns
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def new_share_id() -> str:
    return str(uuid.uuid4())


def new_delete_token() -> str:
    return secrets.token_urlsafe(24)


def share_expiry(now: datetime, ttl_days: int) -> datetime:
    return now + timedelta(days=ttl_days)


class ShareRepository(Protocol):
    """Repository for shared itineraries."""

    async def create_share(
        self, markdown: str, payload: dict[str, Any], *, ttl_days: int, now: datetime
    ) -> ShareRecord:
        """Store a new share.

        Args:
            markdown: Itinerary document
            payload: Trip parameters and client metadata
            ttl_days: Days until the share expires
            now: Creation time

        Returns:
            Stored record including its delete token
        """
        ...

    async def get_share(self, share_id: str, now: datetime) -> ShareRecord | None:
        """Get a share that is neither deleted nor expired.

        Args:
            share_id: Share ID
            now: Current time used for the expiry check

        Returns:
            ShareRecord or None if missing, expired or deleted
        """
        ...

    async def delete_share(self, share_id: str, delete_token: str, now: datetime) -> bool:
        """Soft-delete a share when the token matches.

        Args:
            share_id: Share ID
            delete_token: Token returned at creation
            now: Deletion time

        Returns:
            True if a share was deleted, False if id or token did not match
        """
        ...
