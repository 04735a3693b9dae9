import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

# Default to SQLite for tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_orders.db")
os.environ.setdefault("LOG_JSON", "false")

from restaurant_orders.config import Settings  # noqa: E402
from restaurant_orders.exceptions import PersistenceFailure  # noqa: E402
from restaurant_orders.main import create_app  # noqa: E402
from restaurant_orders.manager import OrderLifecycleManager  # noqa: E402
from restaurant_orders.store import MemoryOrderStore  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FlakyStore(MemoryOrderStore):
    """MemoryOrderStore, запись в который можно "сломать"."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_writes = False

    async def _write(self, orders):
        if self.fail_writes:
            raise PersistenceFailure("quota exceeded")
        await super()._write(orders)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return FlakyStore()


@pytest.fixture
def manager(store, clock):
    return OrderLifecycleManager(store, clock=clock)


@pytest.fixture
def naan_order():
    return {
        "table": "5",
        "items": [{"id": "i1", "name": "Naan", "quantity": 2, "price": 40, "category": "Breads"}],
        "amount": 80,
    }


@pytest.fixture
def client(store):
    app = create_app(Settings(SEED_DEMO_ORDERS=False), store=store)
    with TestClient(app) as c:
        yield c
