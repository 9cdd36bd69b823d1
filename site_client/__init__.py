"""Site network client package."""

from site_client.base import DROPPED_HEADERS, NetworkClient, strip_headers

__all__ = [
    "NetworkClient",
    "DROPPED_HEADERS",
    "strip_headers",
]
