"""Share models - publicly readable itinerary snapshots."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import Field

from backend.app.models.common import CamelModel


class ShareCreateRequest(CamelModel):
    """Body of POST /share.

    `payload` carries the trip parameters and any client metadata as stored;
    it is not re-validated so documents with zero nights can be shared.
    """

    markdown: Annotated[str, Field(min_length=1)]
    payload: dict[str, Any] = Field(default_factory=dict)


class ShareCreateResponse(CamelModel):
    """Identifier, expiry and the one-time delete token of a new share."""

    id: str
    expires_at: datetime | None
    delete_token: str


class SharedItineraryResponse(CamelModel):
    """Public view of a shared itinerary."""

    id: str
    markdown: str
    payload: dict[str, Any]
    created_at: datetime
    expires_at: datetime | None
