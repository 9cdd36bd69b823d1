"""Dependency Injection container - initialized at app startup."""

import duckdb
import httpx

from app.repositories.cache import CacheStorageRepository
from app.services.cache import CacheStatsService, CacheStorage
from app.services.worker.registry import ScriptLoader, WorkerRegistry
from app.services.worker.script import load_local_script
from settings import SITE_ORIGIN
from site_client import NetworkClient


class Container:
    """Application DI container - holds all singleton instances."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def init(
        self,
        conn: duckdb.DuckDBPyConnection | None = None,
        origin: str = SITE_ORIGIN,
        transport: httpx.AsyncBaseTransport | None = None,
        script_loader: ScriptLoader | None = load_local_script,
    ) -> None:
        """Initialize all dependencies. Call once at app startup."""
        if self._initialized:
            return

        # Repositories (singletons)
        self.cache_repo = CacheStorageRepository(conn=conn)

        # Network
        self.network = NetworkClient(origin=origin, transport=transport)

        # Services (with injected repos)
        self.caches = CacheStorage(
            repo=self.cache_repo,
            fetch=self.network.fetch,
            base_url=self.network.origin,
        )
        self.registry = WorkerRegistry(
            caches=self.caches,
            fetch=self.network.fetch,
            origin=self.network.origin,
            script_loader=script_loader,
        )
        self.stats = CacheStatsService(repo=self.cache_repo)

        self._initialized = True

    async def close(self) -> None:
        """Release the network client; init() may be called again afterwards."""
        if not self._initialized:
            return
        await self.network.aclose()
        self._initialized = False


# Global container instance
container = Container()
