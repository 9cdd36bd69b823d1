"""Worker script - the versioned definition a worker is built from.

Its JSON form is what ``/sw.js`` serves. Two scripts are the same worker
when their serialized bytes are identical.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from settings import (
    CACHE_NAME,
    CACHE_URLS,
    CACHE_VERSION,
    CLEAR_CACHE_MESSAGE,
    REMOTE_ASSET_HOST,
    STATIC_EXTENSIONS,
)


class WorkerScript(BaseModel):
    """Cache name, seed list and caching rules for one worker version."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str = CACHE_VERSION
    cache_name: str = CACHE_NAME
    precache: list[str] = Field(default_factory=lambda: list(CACHE_URLS))
    static_extensions: list[str] = Field(default_factory=lambda: list(STATIC_EXTENSIONS))
    remote_asset_host: str = REMOTE_ASSET_HOST
    clear_cache_message: str = CLEAR_CACHE_MESSAGE

    @field_validator("cache_name", "clear_cache_message")
    @classmethod
    def validate_not_empty(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("must not be empty")
        return normalized

    @field_validator("static_extensions")
    @classmethod
    def normalize_extensions(cls, value: list[str]) -> list[str]:
        return [ext.strip().lstrip(".").lower() for ext in value if ext.strip()]

    @field_validator("remote_asset_host")
    @classmethod
    def normalize_host(cls, value: str) -> str:
        return value.strip().lower()

    def to_bytes(self) -> bytes:
        """Serialized script body."""
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "WorkerScript":
        return cls.model_validate_json(raw)
