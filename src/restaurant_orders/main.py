import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .api import health
from .api.routes.orders import router as orders_router
from .config import Settings, settings as default_settings
from .db.session import create_engine, create_session_factory, create_tables
from .logging_config import configure_logging
from .manager import OrderLifecycleManager
from .seed import demo_orders
from .store import OrderStore, SqlOrderStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[OrderStore] = None) -> FastAPI:
    """
    Собирает приложение.
    Если store не передан, используется SqlOrderStore поверх settings.DATABASE_URL.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        order_store = store
        if order_store is None:
            engine = create_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
            if settings.AUTO_CREATE_TABLES:
                await create_tables(engine)
            order_store = SqlOrderStore(create_session_factory(engine))

        manager = OrderLifecycleManager(order_store)
        await manager.load(demo_orders() if settings.SEED_DEMO_ORDERS else ())
        app.state.order_manager = manager
        logger.info("Application started")
        yield
        logger.info("Application stopped")
        if engine is not None:
            await engine.dispose()

    app = FastAPI(title="Restaurant Orders", lifespan=lifespan)

    # Подключаем роуты
    app.include_router(health.router)
    app.include_router(orders_router)
    return app


configure_logging(default_settings.LOG_LEVEL, json_format=default_settings.LOG_JSON)

app = create_app()
