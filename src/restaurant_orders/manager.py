import asyncio
import logging
import secrets
import string
from datetime import date, datetime, timezone
from typing import Callable, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from restaurant_orders import queries
from restaurant_orders.exceptions import InvalidTransition, OrderNotFound, PersistenceFailure, ValidationFailure
from restaurant_orders.schemas.order import Order, OrderCreate, OrderFilters, OrderStats, OrderUpdate
from restaurant_orders.store import OrderStore
from restaurant_orders.transitions import check_transition

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_uppercase
_ID_ATTEMPTS = 32


def generate_order_id() -> str:
    return "ORD" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _errors(e: ValidationError) -> list:
    # без ctx/input, чтобы ошибки сериализовались в JSON
    return e.errors(include_url=False, include_context=False, include_input=False)


def _validate(model: type[BaseModel], data):
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationFailure(f"Invalid {model.__name__}", _errors(e)) from e


class OrderLifecycleManager:
    """
    Единственная точка изменения коллекции заказов.

    Хранилище, часы и генератор id передаются снаружи, глобального состояния нет.
    Изменения выполняются по одному под asyncio.Lock; каждое принятое изменение
    обновляет updated_at и сразу сохраняется. Ошибка сохранения не отменяет
    изменение в памяти, она логируется и остаётся в `persistence_error`.
    """

    def __init__(
        self,
        store: OrderStore,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = generate_order_id,
    ):
        self.store = store
        self._clock = clock
        self._id_factory = id_factory
        self._issued_ids: set[str] = set()
        self._lock = asyncio.Lock()
        self.persistence_error: Optional[PersistenceFailure] = None

    @property
    def orders(self) -> List[Order]:
        return self.store.orders

    async def load(self, default: Iterable[Order] = ()) -> List[Order]:
        orders = await self.store.load(default)
        self._issued_ids.update(o.id for o in orders)
        logger.info("Loaded %d orders", len(orders))
        return orders

    async def persist(self) -> None:
        """Повторная попытка сохранить текущий снимок. Бросает PersistenceFailure."""
        async with self._lock:
            try:
                await self.store.save(self.store.orders)
            except PersistenceFailure as e:
                self.persistence_error = e
                raise
            self.persistence_error = None

    # -------------------- mutations --------------------

    async def create_order(self, data: Union[OrderCreate, Mapping]) -> Order:
        payload = _validate(OrderCreate, data)

        async with self._lock:
            now = self._now()
            try:
                order = Order(id=self._next_id(), created_at=now, updated_at=now, **payload.model_dump())
            except ValidationError as e:
                raise ValidationFailure("Invalid Order", _errors(e)) from e

            await self._commit(lambda orders: [order, *orders])

        logger.info("Order %s created for %s, amount %s", order.id, order.table, order.amount)
        return order

    async def update_order(self, order_id: str, patch: Union[OrderUpdate, Mapping]) -> Order:
        """
        Частичное обновление заказа.
        Недопустимая смена статуса отклоняет весь patch целиком: заказ не меняется.
        """
        changes = _validate(OrderUpdate, patch).model_dump(exclude_unset=True)

        async with self._lock:
            current = self._find(order_id)
            if not changes:
                return current

            if "status" in changes:
                if changes["status"] is None:
                    raise ValidationFailure("status cannot be null")
                outcome = check_transition(current, changes["status"])
                if isinstance(outcome, InvalidTransition):
                    logger.warning("Order %s: %s", order_id, outcome)
                    raise outcome

            merged = current.model_dump()
            merged.update(changes)
            merged["updated_at"] = self._now(current.updated_at)
            try:
                updated = Order.model_validate(merged)
            except ValidationError as e:
                raise ValidationFailure(f"Invalid update for order {order_id}", _errors(e)) from e

            await self._commit(lambda orders: [updated if o.id == order_id else o for o in orders])

        return updated

    async def delete_order(self, order_id: str) -> None:
        async with self._lock:
            if not any(o.id == order_id for o in self.store.orders):
                return
            await self._commit(lambda orders: [o for o in orders if o.id != order_id])
        logger.info("Order %s deleted", order_id)

    # -------------------- reads --------------------

    def get_order(self, order_id: str) -> Order:
        return self._find(order_id)

    def by_status(self, status) -> List[Order]:
        return queries.by_status(self.orders, status)

    def by_payment_status(self, payment_status) -> List[Order]:
        return queries.by_payment_status(self.orders, payment_status)

    def by_date(self, date_prefix: str) -> List[Order]:
        return queries.by_date(self.orders, date_prefix)

    def daily_sales(self, date_prefix: str):
        return queries.daily_sales(self.orders, date_prefix)

    def total_sales(self):
        return queries.total_sales(self.orders)

    def filter_orders(self, filters: Optional[OrderFilters] = None) -> List[Order]:
        return queries.filter_orders(self.orders, filters)

    def stats(self, day: Optional[date] = None) -> OrderStats:
        return queries.order_stats(self.orders, day or self._now().date())

    # -------------------- internals --------------------

    def _find(self, order_id: str) -> Order:
        for order in self.store.orders:
            if order.id == order_id:
                return order
        raise OrderNotFound(order_id)

    def _next_id(self) -> str:
        for _ in range(_ID_ATTEMPTS):
            candidate = self._id_factory()
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate
        raise RuntimeError("Could not allocate a unique order id")

    def _now(self, previous: Optional[datetime] = None) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        # часы могут пойти назад, updated_at при этом не уменьшается
        if previous is not None and now < previous:
            return previous
        return now

    async def _commit(self, fn: Callable[[List[Order]], Iterable[Order]]) -> None:
        try:
            await self.store.mutate(fn)
        except PersistenceFailure as e:
            self.persistence_error = e
            logger.error("Order state not persisted: %s", e)
        else:
            self.persistence_error = None
