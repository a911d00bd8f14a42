import pytest
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient

from rentmzansi.main import app
from rentmzansi.core.config import StorageKeys
from rentmzansi.core.rate_limiting import limiter
from rentmzansi.core.storage import LocalStore, MemoryStorage


class FakeClock:
    """Controllable clock handed to services in place of utcnow"""

    def __init__(self, start: datetime = None):
        self.current = start or datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


@pytest.fixture
def backend() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(backend: MemoryStorage) -> LocalStore:
    """Store scoped to one client profile"""
    return LocalStore(backend, StorageKeys(), prefix="test:").for_namespace("default")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="function")
async def client(backend: MemoryStorage) -> AsyncGenerator[AsyncClient, None]:
    """Create test client"""
    # ASGITransport does not run the lifespan, so wire storage directly
    app.state.storage = LocalStore(backend, StorageKeys(), prefix="test:")
    limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    del app.state.storage
