"""Cache domain entities."""

from dataclasses import dataclass, field
from datetime import datetime

from app.models.common import BaseEntity


@dataclass
class CacheEntry(BaseEntity):
    """A stored response, as persisted in a bucket."""

    method: str
    url: str
    status: int
    status_text: str
    headers: dict[str, str]
    body: bytes
    response_type: str
    stored_at: datetime | None = None


@dataclass
class BucketSummary(BaseEntity):
    """Bucket name with entry count and total body size."""

    name: str
    entries: int
    total_bytes: int
    created_at: datetime | None = None
    urls: list[str] = field(default_factory=list)
