"""Worker API request/response schemas."""

from pydantic import BaseModel

from settings import WORKER_SCOPE


class WorkerInfo(BaseModel):
    """One worker version."""

    id: int
    state: str
    cache_name: str
    version: str


class RegistrationItem(BaseModel):
    """Registration for a scope."""

    scope: str
    script_url: str
    installing: WorkerInfo | None = None
    waiting: WorkerInfo | None = None
    active: WorkerInfo | None = None


class StatusResponse(BaseModel):
    """Registrations and the configured cache name."""

    items: list[RegistrationItem]
    cache_name: str


class CacheItem(BaseModel):
    """Bucket summary."""

    name: str
    entries: int
    total_bytes: int
    current: bool


class CachesResponse(BaseModel):
    items: list[CacheItem]
    current: str


class KindItem(BaseModel):
    kind: str
    entries: int
    bytes: int


class CacheDetailResponse(BaseModel):
    """Bucket with entry URLs and per-kind totals."""

    name: str
    entries: int
    total_bytes: int
    urls: list[str]
    kinds: list[KindItem]


class RegisterRequest(BaseModel):
    scope: str = WORKER_SCOPE


class ConsentRequest(BaseModel):
    accepted: bool


class ConsentResponse(BaseModel):
    accepted: bool
    registered: bool
    cleared: int = 0


class MessageResponse(BaseModel):
    delivered: bool
