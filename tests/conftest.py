"""
Shared pytest fixtures and configuration for all tests.
"""

import pytest

from graphloader.cache import KeyedCache
from graphloader.config import Settings
from graphloader.errors import StoreError
from graphloader.graphql import QueryEngine
from graphloader.store import RecordStore


class CountingStore(RecordStore):
    """Record store that remembers every batch it was asked for."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.batches: list[list[str]] = []
        self.lookups: list[str] = []

    async def lookup(self, user_id):
        self.lookups.append(user_id)
        return await super().lookup(user_id)

    async def fetch_users(self, user_ids):
        keys = list(user_ids)
        self.batches.append(keys)
        return await super().fetch_users(keys)

    @property
    def fetched_keys(self) -> list[str]:
        return [key for batch in self.batches for key in batch]


class FailingStore(CountingStore):
    """Record store whose backend is down."""

    async def fetch_users(self, user_ids):
        self.batches.append(list(user_ids))
        raise StoreError("connection refused")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> CountingStore:
    return CountingStore(latency=0)


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore(latency=0)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        cache_ttl_seconds=600,
        cache_max_size=128,
        store_latency_seconds=0,
        query_timeout_seconds=5,
    )


@pytest.fixture
def cache(clock: FakeClock) -> KeyedCache:
    return KeyedCache(ttl=600, maxsize=128, timer=clock)


@pytest.fixture
def engine(test_settings: Settings, store: CountingStore, cache: KeyedCache) -> QueryEngine:
    return QueryEngine(settings=test_settings, store=store, cache=cache)
