"""Worker registry - registrations per scope, clients and event dispatch."""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urljoin, urlsplit
from uuid import uuid4

from loguru import logger
from pydantic import ValidationError

from app.errors import InstallError, InvalidStateError, SecurityError
from app.models.http import Request, Response
from app.models.worker import WorkerScript, WorkerState
from app.services.cache.storage import CacheStorage
from app.services.worker.events import ActivateEvent, FetchEvent, InstallEvent, MessageEvent
from app.services.worker.handlers import Handler
from app.services.worker.worker import ServiceWorker, WorkerGlobalScope
from settings import WORKER_SCOPE, WORKER_SCRIPT_PATH

ScriptLoader = Callable[[str], Awaitable[Response]]
Fetch = Callable[[Request], Awaitable[Response]]


@dataclass
class Client:
    """An open page (tab) and the worker controlling it, if any."""

    url: str
    id: str = field(default_factory=lambda: uuid4().hex)
    controller: ServiceWorker | None = None


class Registration:
    """Workers registered for one scope."""

    def __init__(self, scope: str, script_url: str):
        self.scope = scope
        self.script_url = script_url
        self.installing: ServiceWorker | None = None
        self.waiting: ServiceWorker | None = None
        self.active: ServiceWorker | None = None

    def __repr__(self) -> str:
        return f"<Registration {self.scope!r} active={self.active}>"

    @property
    def newest(self) -> ServiceWorker | None:
        return self.installing or self.waiting or self.active

    @property
    def workers(self) -> list[ServiceWorker]:
        return [w for w in (self.installing, self.waiting, self.active) if w is not None]

    def covers(self, url: str) -> bool:
        return url.startswith(self.scope)

    def to_dict(self) -> dict:
        def describe(worker: ServiceWorker | None) -> dict | None:
            if worker is None:
                return None
            return {
                "id": worker.id,
                "state": str(worker.state),
                "cache_name": worker.script.cache_name,
                "version": worker.script.version,
            }

        return {
            "scope": self.scope,
            "script_url": self.script_url,
            "installing": describe(self.installing),
            "waiting": describe(self.waiting),
            "active": describe(self.active),
        }


class Clients:
    """Client API bound to one worker, as exposed to its handlers."""

    def __init__(self, registry: "WorkerRegistry", registration: Registration, worker: ServiceWorker):
        self._registry = registry
        self._registration = registration
        self._worker = worker

    async def claim(self) -> None:
        """Become the controller of every in-scope client."""
        if self._registration.active is not self._worker:
            raise InvalidStateError("Only the active worker can claim clients")
        claimed = 0
        for client in self._registry.clients():
            if self._registry.match_registration(client.url) is self._registration:
                client.controller = self._worker
                claimed += 1
        logger.info("Worker #{} claimed {} clients", self._worker.id, claimed)

    async def match_all(self) -> list[Client]:
        return [c for c in self._registry.clients() if c.controller is self._worker]


def _directory(url: str) -> str:
    return url.rsplit("/", 1)[0] + "/"


class WorkerRegistry:
    """Registers workers for scopes on one origin and routes events to them."""

    def __init__(
        self,
        caches: CacheStorage,
        fetch: Fetch,
        origin: str,
        script_loader: ScriptLoader | None = None,
        handlers: Mapping[str, Handler] | None = None,
    ):
        self.origin = origin.rstrip("/")
        self.caches = caches
        self._fetch = fetch
        self._load_script = script_loader or self._fetch_script
        self._handlers = handlers
        self._registrations: dict[str, Registration] = {}
        self._clients: dict[str, Client] = {}
        self._lock = asyncio.Lock()

    async def _fetch_script(self, url: str) -> Response:
        return await self._fetch(Request(url))

    def _absolute(self, url: str) -> str:
        return urljoin(self.origin + "/", url)

    # ========== Registrations ==========

    def registrations(self) -> list[Registration]:
        return list(self._registrations.values())

    def get_registration(self, scope: str = WORKER_SCOPE) -> Registration | None:
        return self._registrations.get(self._absolute(scope))

    def match_registration(self, url: str) -> Registration | None:
        """Registration with the longest scope covering url."""
        matches = [r for r in self._registrations.values() if r.covers(url)]
        return max(matches, key=lambda r: len(r.scope), default=None)

    def _check_scope(self, script_url: str, scope_url: str, allowed: str | None) -> None:
        for url in (script_url, scope_url):
            if Request(url).origin != Request(self.origin).origin:
                raise SecurityError(f"Cross-origin worker URL: {url}")

        max_scope = urljoin(script_url, allowed) if allowed else _directory(script_url)
        if not urlsplit(scope_url).path.startswith(urlsplit(max_scope).path):
            raise SecurityError(
                f"Scope {scope_url} is outside the max scope {max_scope}; "
                "serve the script with a Service-Worker-Allowed header to widen it"
            )

    async def register(self, script_url: str = WORKER_SCRIPT_PATH, scope: str | None = None) -> Registration:
        """Load the script and install it for scope, unless it is unchanged."""
        script_url = self._absolute(script_url)
        scope_url = urljoin(script_url, scope) if scope is not None else _directory(script_url)

        async with self._lock:
            response = await self._load_script(script_url)
            if not response.ok:
                raise InstallError(f"Script fetch failed: {script_url} ({response.status})")
            self._check_scope(script_url, scope_url, response.headers.get("service-worker-allowed"))

            body = response.read()
            try:
                script = WorkerScript.from_bytes(body)
            except ValidationError as e:
                raise InstallError(f"Invalid worker script at {script_url}: {e}") from e

            registration = self._registrations.get(scope_url)
            if registration is None:
                registration = Registration(scope_url, script_url)
                self._registrations[scope_url] = registration

            newest = registration.newest
            if newest is not None and newest.script_url == script_url and newest.script_bytes == body:
                logger.info("Worker unchanged for scope {}", scope_url)
                return registration

            logger.info("Update found for scope {}: {}", scope_url, script.cache_name)
            registration.script_url = script_url
            worker = ServiceWorker(script, script_url, body, self._handlers)
            await self._install(registration, worker)
            return registration

    async def _install(self, registration: Registration, worker: ServiceWorker) -> None:
        worker.scope = WorkerGlobalScope(worker, self.caches, self._fetch, Clients(self, registration, worker))

        if registration.installing is not None:
            registration.installing.set_state(WorkerState.REDUNDANT)
        registration.installing = worker
        worker.set_state(WorkerState.INSTALLING)

        try:
            await worker.dispatch_lifecycle(InstallEvent())
        except Exception as e:
            registration.installing = None
            worker.set_state(WorkerState.REDUNDANT)
            if not registration.workers:
                del self._registrations[registration.scope]
            logger.error("Install failed for {}: {!r}", worker.script.cache_name, e)
            raise InstallError(f"Install failed for {worker.script.cache_name}: {e}") from e

        registration.installing = None
        if registration.waiting is not None:
            registration.waiting.set_state(WorkerState.REDUNDANT)
        registration.waiting = worker
        worker.set_state(WorkerState.INSTALLED)
        await self._try_activate(registration)

    async def _try_activate(self, registration: Registration) -> None:
        worker = registration.waiting
        if worker is None:
            return

        active = registration.active
        if active is not None and not worker.skip_waiting_flag and any(c.controller is active for c in self.clients()):
            logger.info("Worker #{} waiting: clients still controlled by #{}", worker.id, active.id)
            return

        await self._activate(registration)

    async def _activate(self, registration: Registration) -> None:
        worker = registration.waiting
        previous = registration.active
        if previous is not None:
            previous.set_state(WorkerState.REDUNDANT)

        registration.waiting = None
        registration.active = worker
        for client in self.clients():
            if previous is not None and client.controller is previous:
                client.controller = worker

        worker.set_state(WorkerState.ACTIVATING)
        try:
            await worker.dispatch_lifecycle(ActivateEvent())
        except Exception as e:
            # Activation failures do not roll back: the worker is already in place
            logger.error("Activate handler failed for {}: {!r}", worker.script.cache_name, e)
        worker.set_state(WorkerState.ACTIVATED)

    async def unregister(self, scope: str = WORKER_SCOPE) -> bool:
        """Remove the registration; its clients become uncontrolled."""
        async with self._lock:
            registration = self._registrations.pop(self._absolute(scope), None)
            if registration is None:
                return False

            for worker in registration.workers:
                worker.set_state(WorkerState.REDUNDANT)
                for client in self.clients():
                    if client.controller is worker:
                        client.controller = None
            logger.info("Unregistered scope {}", registration.scope)
            return True

    async def revoke(self) -> int:
        """Unregister everything and delete all caches. Returns buckets deleted."""
        for registration in self.registrations():
            await self.unregister(registration.scope)

        names = await self.caches.keys()
        for name in names:
            await self.caches.delete(name)
        logger.info("Worker revoked: {} caches cleared", len(names))
        return len(names)

    # ========== Clients ==========

    def clients(self) -> list[Client]:
        return list(self._clients.values())

    def open_client(self, url: str) -> Client:
        """A navigation under an active registration is controlled from the start."""
        url = self._absolute(url)
        registration = self.match_registration(url)
        controller = registration.active if registration else None
        client = Client(url=url, controller=controller)
        self._clients[client.id] = client
        return client

    async def close_client(self, client_id: str) -> None:
        client = self._clients.pop(client_id, None)
        if client is None:
            return
        # Last controlled client gone: a waiting worker may take over now
        for registration in self.registrations():
            await self._try_activate(registration)

    # ========== Events ==========

    async def fetch(self, request: Request, client: Client | None = None) -> Response:
        """Route a request through the controlling worker, or the network."""
        if client is not None:
            worker = client.controller
        else:
            registration = self.match_registration(request.url)
            worker = registration.active if registration else None

        if worker is None or worker.state != WorkerState.ACTIVATED:
            return await self._fetch(request)

        response = await worker.dispatch_fetch(FetchEvent(request, client.id if client else None))
        if response is None:
            return await self._fetch(request)
        return response

    async def post_message(self, data: Any, scope: str = WORKER_SCOPE, source: str | None = None) -> bool:
        """Deliver data to the active worker. Returns False when nothing is active."""
        registration = self.get_registration(scope)
        if registration is None or registration.active is None:
            logger.debug("Message dropped: no active worker for {}", scope)
            return False

        await registration.active.dispatch_message(MessageEvent(data, source))
        return True
