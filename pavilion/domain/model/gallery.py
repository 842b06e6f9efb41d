"""Gallery entity.

Galleries are the resources invites grant access to. The access core only
reads them: to confirm an invite's target still exists, to decide who owns
it, and to attach title and description to a redemption response.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from pavilion.domain.model.common import DomainModel
from pavilion.domain.value import GalleryId, UserId


class Gallery(DomainModel):
    """A private media collection owned by one identity."""

    id: GalleryId
    owner_id: UserId
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
