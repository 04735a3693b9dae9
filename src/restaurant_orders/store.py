"""
Хранилище заказов: рабочая коллекция в памяти плюс долговременная копия.

Каждое изменение рабочей коллекции сразу сохраняется целиком.
Если сохранить не удалось, изменение в памяти остаётся,
а наверх поднимается PersistenceFailure.
"""
import logging
from typing import Callable, Iterable, List, MutableMapping, Optional, Sequence

from pydantic import TypeAdapter
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from restaurant_orders.crud.order import get_orders, get_store_state, replace_orders
from restaurant_orders.exceptions import PersistenceFailure
from restaurant_orders.schemas.order import Order

logger = logging.getLogger(__name__)

DEFAULT_KEY = "orders"

_orders_adapter = TypeAdapter(List[Order])


class OrderStore:
    """Базовый контракт: load / save / replace / mutate."""

    def __init__(self, key: str = DEFAULT_KEY):
        self.key = key
        self._orders: List[Order] = []

    @property
    def orders(self) -> List[Order]:
        return list(self._orders)

    async def load(self, default: Iterable[Order] = ()) -> List[Order]:
        """
        Восстанавливает коллекцию. Если сохранённых данных нет
        или их не удалось прочитать, берётся default. Не бросает исключений.
        """
        try:
            persisted = await self._read()
        except (ValueError, SQLAlchemyError, OSError) as e:
            logger.warning("Could not restore orders from %s slot %r, using default: %s", type(self).__name__, self.key, e)
            persisted = None

        self._orders = list(default) if persisted is None else list(persisted)
        return self.orders

    async def save(self, orders: Sequence[Order]) -> None:
        await self._write(list(orders))

    async def replace(self, orders: Iterable[Order]) -> List[Order]:
        self._orders = list(orders)
        await self.save(self._orders)
        return self.orders

    async def mutate(self, fn: Callable[[List[Order]], Iterable[Order]]) -> List[Order]:
        return await self.replace(fn(self.orders))

    async def _read(self) -> Optional[List[Order]]:
        raise NotImplementedError

    async def _write(self, orders: List[Order]) -> None:
        raise NotImplementedError


class MemoryOrderStore(OrderStore):
    """
    Слоты ключ-значение с JSON внутри, как localStorage в браузере.
    Удобно подменять в тестах.
    """

    def __init__(self, slots: Optional[MutableMapping[str, str]] = None, key: str = DEFAULT_KEY):
        super().__init__(key)
        self.slots = {} if slots is None else slots

    async def _read(self) -> Optional[List[Order]]:
        raw = self.slots.get(self.key)
        if raw is None:
            return None
        return _orders_adapter.validate_json(raw)

    async def _write(self, orders: List[Order]) -> None:
        try:
            self.slots[self.key] = _orders_adapter.dump_json(orders, by_alias=True).decode()
        except (ValueError, TypeError) as e:
            raise PersistenceFailure(f"Could not serialize orders: {e}") from e


class SqlOrderStore(OrderStore):
    """Коллекция в таблицах orders / order_items через SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], key: str = DEFAULT_KEY):
        super().__init__(key)
        self.session_factory = session_factory

    async def _read(self) -> Optional[List[Order]]:
        async with self.session_factory() as db:
            if await get_store_state(db, self.key) is None:
                return None
            return await get_orders(db)

    async def _write(self, orders: List[Order]) -> None:
        try:
            async with self.session_factory() as db:
                await replace_orders(db, orders, self.key)
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not save orders: {e}") from e
