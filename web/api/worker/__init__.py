"""Worker API."""

from web.api.worker.views import (
    consent,
    get_cache,
    get_caches,
    get_status,
    post_message,
    register,
    unregister,
)

__all__ = [
    "get_status",
    "get_caches",
    "get_cache",
    "register",
    "unregister",
    "consent",
    "post_message",
]
