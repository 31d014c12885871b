"""Share endpoints - create, read and soft-delete public itinerary links."""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_session
from backend.app.db.repositories import ShareRepository
from backend.app.db.sql_repositories import SqlShareRepository
from backend.app.middleware.ratelimit import rate_limit
from backend.app.models.share import (
    ShareCreateRequest,
    ShareCreateResponse,
    SharedItineraryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/share", tags=["share"])


def get_share_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ShareRepository:
    """Share repository dependency backed by the database."""
    return SqlShareRepository(session)


@router.post(
    "",
    response_model=ShareCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("share-create"))],
)
async def create_share(
    request: ShareCreateRequest,
    repo: Annotated[ShareRepository, Depends(get_share_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ShareCreateResponse:
    """Store a snapshot and return its id, expiry and delete token."""
    record = await repo.create_share(
        request.markdown,
        request.payload,
        ttl_days=settings.share_ttl_days,
        now=datetime.now(timezone.utc),
    )
    logger.info(f"Share created: {record.id}", extra={"structured": {"share_id": record.id}})

    return ShareCreateResponse(
        id=record.id, expires_at=record.expires_at, delete_token=record.delete_token
    )


@router.get(
    "/{share_id}",
    response_model=SharedItineraryResponse,
    dependencies=[Depends(rate_limit("share-get"))],
)
async def get_share(
    share_id: str,
    repo: Annotated[ShareRepository, Depends(get_share_repository)],
) -> SharedItineraryResponse:
    """Read a share.

    Raises:
        HTTPException: 404 if missing, expired or deleted
    """
    record = await repo.get_share(share_id, datetime.now(timezone.utc))
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Share not found")

    return SharedItineraryResponse(
        id=record.id,
        markdown=record.markdown,
        payload=record.payload,
        created_at=record.created_at,
        expires_at=record.expires_at,
    )


@router.delete(
    "/{share_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(rate_limit("share-delete"))],
)
async def delete_share(
    share_id: str,
    repo: Annotated[ShareRepository, Depends(get_share_repository)],
    x_delete_token: Annotated[str | None, Header()] = None,
) -> None:
    """Soft-delete a share.

    Raises:
        HTTPException: 401 without a delete token, 404 if id or token do not match
    """
    if not x_delete_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Delete token required")

    deleted = await repo.delete_share(share_id, x_delete_token, datetime.now(timezone.utc))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Share not found")
    logger.info(f"Share deleted: {share_id}")
