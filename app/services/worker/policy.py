"""Interception and caching rules."""

import re
from functools import lru_cache

from app.models.http import Request
from app.models.worker import WorkerScript

HTTP_SCHEMES = ("http", "https")

# Asset kinds for reporting, by extension
ASSET_KINDS = {
    "image": ("jpg", "jpeg", "png", "gif", "webp", "avif", "svg"),
    "stylesheet": ("css",),
    "script": ("js",),
    "font": ("woff", "woff2", "ttf"),
}


@lru_cache(maxsize=16)
def static_pattern(extensions: tuple[str, ...]) -> re.Pattern:
    """Case-insensitive path-suffix pattern for the given extensions."""
    alternatives = "|".join(re.escape(ext) for ext in extensions)
    return re.compile(rf"\.({alternatives})$", re.IGNORECASE)


def should_intercept(request: Request) -> bool:
    """Only GET over http(s) reaches the cache-first path."""
    return request.method == "GET" and request.scheme in HTTP_SCHEMES


def is_static_asset(request: Request, script: WorkerScript) -> bool:
    return bool(static_pattern(tuple(script.static_extensions)).search(request.path))


def should_cache(request: Request, script: WorkerScript) -> bool:
    """Static extension OR the allow-listed remote host (either is enough)."""
    return is_static_asset(request, script) or request.hostname == script.remote_asset_host


def asset_kind(url: str, remote_host: str) -> str:
    request = Request(url)
    if request.hostname == remote_host:
        return "remote"
    for kind, extensions in ASSET_KINDS.items():
        if static_pattern(extensions).search(request.path):
            return kind
    return "page"
