"""Worker version and the global scope its handlers run against."""

import itertools
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING

from loguru import logger

from app.models.http import Request, Response
from app.models.worker import WorkerScript, WorkerState
from app.services.cache.storage import CacheStorage
from app.services.worker.events import ExtendableEvent, FetchEvent, MessageEvent
from app.services.worker.handlers import HANDLERS, Handler

if TYPE_CHECKING:
    from app.services.worker.registry import Clients

_ids = itertools.count(1)


class WorkerGlobalScope:
    """What handlers see: caches, fetch, clients, skip_waiting and the script."""

    def __init__(
        self,
        worker: "ServiceWorker",
        caches: CacheStorage,
        fetch: Callable[[Request], Awaitable[Response]],
        clients: "Clients",
    ):
        self._worker = worker
        self._fetch = fetch
        self.caches = caches
        self.clients = clients

    @property
    def script(self) -> WorkerScript:
        return self._worker.script

    async def fetch(self, request: Request) -> Response:
        return await self._fetch(request)

    def skip_waiting(self) -> None:
        """Activate as soon as installed, even if an older version controls clients."""
        self._worker.skip_waiting_flag = True


class ServiceWorker:
    """One installed version of the worker script."""

    def __init__(
        self,
        script: WorkerScript,
        script_url: str,
        script_bytes: bytes,
        handlers: Mapping[str, Handler] | None = None,
    ):
        self.id = next(_ids)
        self.script = script
        self.script_url = script_url
        self.script_bytes = script_bytes
        self.state = WorkerState.PARSED
        self.skip_waiting_flag = False
        self.scope: WorkerGlobalScope | None = None
        self._handlers = dict(HANDLERS if handlers is None else handlers)

    def __repr__(self) -> str:
        return f"<ServiceWorker #{self.id} {self.script.cache_name} {self.state}>"

    def set_state(self, state: WorkerState) -> None:
        logger.info("Worker #{} ({}): {} -> {}", self.id, self.script.cache_name, self.state, state)
        self.state = state

    def _run_handler(self, event: ExtendableEvent) -> bool:
        """Run the handler synchronously. Returns False if none is registered."""
        handler = self._handlers.get(event.type)
        if handler is None:
            return False
        with event.dispatching():
            handler(event, self.scope)
        return True

    async def dispatch_lifecycle(self, event: ExtendableEvent) -> None:
        """Install/activate: handler errors and failed extensions propagate."""
        if self._run_handler(event):
            await event.settle()

    async def dispatch_fetch(self, event: FetchEvent) -> Response | None:
        """Returns the worker's response, or None when it did not respond."""
        try:
            handled = self._run_handler(event)
        except Exception as e:
            logger.error("Fetch handler failed for {}: {!r}", event.request.url, e)
            handled = event.responded
        if not handled or not event.responded:
            return None

        response = await event.response()
        await event.settle(raise_errors=False)
        return response

    async def dispatch_message(self, event: MessageEvent) -> None:
        try:
            handled = self._run_handler(event)
        except Exception as e:
            logger.error("Message handler failed: {!r}", e)
            return
        if handled:
            await event.settle(raise_errors=False)
