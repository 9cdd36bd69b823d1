"""Worker API paths shared by the site edge and the dashboard."""

from urllib.parse import quote

STATUS = "/sw/status"
REGISTER = "/sw/register"
UNREGISTER = "/sw/unregister"
CONSENT = "/sw/consent"
MESSAGE = "/sw/message"
CACHES = "/sw/caches"


def cache_path(name: str) -> str:
    """Detail path for a bucket; the name is quoted as one segment."""
    return f"{CACHES}/{quote(name, safe='')}"
