"""Request model - the identity a cache entry is keyed by."""

from dataclasses import dataclass, field
from urllib.parse import urldefrag, urljoin, urlsplit


@dataclass
class Request:
    """An outgoing HTTP request as seen by the worker."""

    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self):
        self.method = self.method.upper()
        # Fragments never reach the network and never take part in matching
        self.url = urldefrag(self.url).url

    @classmethod
    def resolve(cls, url: str, base: str, **kwargs) -> "Request":
        """Build a request for a possibly relative URL against a base origin."""
        return cls(url=urljoin(base, url), **kwargs)

    @property
    def key(self) -> tuple[str, str]:
        """Cache identity: (method, url)."""
        return self.method, self.url

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme.lower()

    @property
    def hostname(self) -> str:
        return urlsplit(self.url).hostname or ""

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    @property
    def origin(self) -> str:
        parts = urlsplit(self.url)
        return f"{parts.scheme}://{parts.netloc}"
