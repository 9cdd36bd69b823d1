"""Offline cache worker - handlers, lifecycle and registry."""

from app.errors import (
    CacheError,
    InstallError,
    InvalidStateError,
    SecurityError,
    WorkerError,
)
from app.services.worker.events import (
    ActivateEvent,
    ExtendableEvent,
    FetchEvent,
    InstallEvent,
    MessageEvent,
)
from app.services.worker.handlers import HANDLERS
from app.services.worker.policy import should_cache, should_intercept
from app.services.worker.registry import Client, Registration, WorkerRegistry
from app.services.worker.script import build_worker_script, load_local_script, worker_script_headers
from app.services.worker.worker import ServiceWorker, WorkerGlobalScope

__all__ = [
    # Errors
    "WorkerError",
    "InstallError",
    "InvalidStateError",
    "SecurityError",
    "CacheError",
    # Events
    "ExtendableEvent",
    "InstallEvent",
    "ActivateEvent",
    "FetchEvent",
    "MessageEvent",
    # Handlers / policy
    "HANDLERS",
    "should_intercept",
    "should_cache",
    # Lifecycle
    "ServiceWorker",
    "WorkerGlobalScope",
    "Client",
    "Registration",
    "WorkerRegistry",
    # Script
    "build_worker_script",
    "worker_script_headers",
    "load_local_script",
]
