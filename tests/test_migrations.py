import asyncio
from datetime import datetime, timezone
from pathlib import Path

from alembic import command
from alembic.config import Config

from restaurant_orders.db.session import create_engine, create_session_factory
from restaurant_orders.models.order import PaymentMethodEnum
from restaurant_orders.seed import demo_orders
from restaurant_orders.store import SqlOrderStore

ROOT = Path(__file__).resolve().parents[1]


def _alembic_config(url: str) -> Config:
    # без ini-файла: fileConfig не трогает логирование тестов
    cfg = Config()
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


def test_migrated_schema_round_trips_orders(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'migrated.db'}"
    cfg = _alembic_config(url)
    command.upgrade(cfg, "head")

    orders = demo_orders(datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc))
    orders[0] = orders[0].model_copy(update={"customer_name": "Asha", "payment_method": PaymentMethodEnum.upi})

    async def scenario():
        engine = create_engine(url)
        store = SqlOrderStore(create_session_factory(engine))
        await store.save(orders)
        restored = await SqlOrderStore(store.session_factory).load()
        await engine.dispose()
        return restored

    assert asyncio.run(scenario()) == orders

    command.downgrade(cfg, "base")
