"""Response model with single-read body semantics."""

import json
from typing import Any

# basic: same-origin, cors: cross-origin readable, error: network-level failure
RESPONSE_TYPES = ("basic", "cors", "default", "error", "opaque", "opaqueredirect")


class Response:
    """HTTP response whose body can be consumed once; clone() to read twice."""

    def __init__(
        self,
        body: bytes = b"",
        status: int = 200,
        status_text: str = "",
        headers: dict[str, str] | None = None,
        url: str = "",
        type: str = "basic",
    ):
        if type not in RESPONSE_TYPES:
            raise ValueError(f"Unknown response type: {type}")
        self.status = status
        self.status_text = status_text
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.url = url
        self.type = type
        self.body_used = False
        self._body = body

    def __repr__(self) -> str:
        return f"<Response [{self.status}] {self.type} {self.url!r}>"

    @classmethod
    def error(cls) -> "Response":
        """Opaque network-error response: no status, no headers, no body."""
        return cls(b"", status=0, type="error")

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299

    def read(self) -> bytes:
        """Consume the body."""
        if self.body_used:
            raise TypeError("Response body is already used")
        self.body_used = True
        return self._body

    def text(self, encoding: str = "utf-8") -> str:
        return self.read().decode(encoding)

    def json(self) -> Any:
        return json.loads(self.read())

    def clone(self) -> "Response":
        """Duplicate the response so both copies can be read."""
        if self.body_used:
            raise TypeError("Cannot clone a response whose body is already used")
        return Response(
            self._body,
            status=self.status,
            status_text=self.status_text,
            headers=dict(self.headers),
            url=self.url,
            type=self.type,
        )
