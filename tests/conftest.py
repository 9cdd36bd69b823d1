"""Shared fixtures: in-memory storage, a fake site origin and a worker script host."""

import duckdb
import pytest

from app.repositories import CacheStorageRepository, init_tables
from app.services.cache import CacheStorage
from app.services.worker import WorkerRegistry
from tests.fakes import ORIGIN, FakeSite, ScriptHost


@pytest.fixture
def conn():
    conn = duckdb.connect(":memory:")
    init_tables(conn)
    yield conn
    conn.close()


@pytest.fixture
def repo(conn):
    return CacheStorageRepository(conn=conn)


@pytest.fixture
def site():
    return FakeSite()


@pytest.fixture
def host():
    return ScriptHost()


@pytest.fixture
def caches(repo, site):
    return CacheStorage(repo=repo, fetch=site.fetch, base_url=ORIGIN)


@pytest.fixture
def registry(caches, site, host):
    return WorkerRegistry(caches=caches, fetch=site.fetch, origin=ORIGIN, script_loader=host.load)
