"""Worker events - lifetime extension and fetch responses."""

import asyncio
from collections.abc import Awaitable, Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger

from app.errors import InvalidStateError
from app.models.http import Request, Response


class ExtendableEvent:
    """Event whose lifetime handlers extend with wait_until()."""

    def __init__(self, type: str):
        self.type = type
        self._dispatching = False
        self._pending: list[asyncio.Future] = []

    @property
    def active(self) -> bool:
        """True while dispatching or while any extension is still running."""
        return self._dispatching or any(not f.done() for f in self._pending)

    @contextmanager
    def dispatching(self) -> Iterator[None]:
        self._dispatching = True
        try:
            yield
        finally:
            self._dispatching = False

    def wait_until(self, awaitable: Awaitable) -> None:
        """Keep the event alive until awaitable completes."""
        if not self.active:
            raise InvalidStateError(f"wait_until() called after '{self.type}' event finished")
        self._pending.append(asyncio.ensure_future(awaitable))

    async def settle(self, raise_errors: bool = True) -> None:
        """Wait for every extension, including ones added while waiting."""
        seen = 0
        errors: list[BaseException] = []
        while seen < len(self._pending):
            batch = self._pending[seen:]
            seen = len(self._pending)
            results = await asyncio.gather(*batch, return_exceptions=True)
            errors.extend(r for r in results if isinstance(r, BaseException))

        if not errors:
            return
        if raise_errors:
            raise errors[0]
        for err in errors:
            logger.warning("'{}' event extension failed: {!r}", self.type, err)


class InstallEvent(ExtendableEvent):
    def __init__(self):
        super().__init__("install")


class ActivateEvent(ExtendableEvent):
    def __init__(self):
        super().__init__("activate")


class MessageEvent(ExtendableEvent):
    """Message posted to the worker; data is any payload."""

    def __init__(self, data: Any, source: str | None = None):
        super().__init__("message")
        self.data = data
        self.source = source


class FetchEvent(ExtendableEvent):
    """Intercepted request. Handlers answer via respond_with() or let it pass."""

    def __init__(self, request: Request, client_id: str | None = None):
        super().__init__("fetch")
        self.request = request
        self.client_id = client_id
        self._response: asyncio.Future | None = None

    @property
    def active(self) -> bool:
        # A pending response also keeps the event alive
        return super().active or (self._response is not None and not self._response.done())

    @property
    def responded(self) -> bool:
        return self._response is not None

    def respond_with(self, awaitable: Awaitable[Response]) -> None:
        """Answer the request; only once and only during dispatch."""
        if not self._dispatching:
            raise InvalidStateError("respond_with() must be called synchronously during dispatch")
        if self._response is not None:
            raise InvalidStateError("respond_with() already called")
        self._response = asyncio.ensure_future(awaitable)

    async def response(self) -> Response | None:
        if self._response is None:
            return None
        return await self._response
