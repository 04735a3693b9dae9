"""
Чистые функции чтения над снимком заказов.

Ничего не кэшируется: каждый вызов пересчитывается по переданной коллекции,
порядок результата совпадает с порядком хранилища (если не задана сортировка).
"""
from datetime import date as date_type, datetime, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional

from pydantic import TypeAdapter

from restaurant_orders.models.order import OrderStatusEnum, PaymentStatusEnum
from restaurant_orders.schemas.order import Order, OrderFilters, OrderStats


CENTS = Decimal("0.01")

_datetime_adapter = TypeAdapter(datetime)


def _created_iso(order: Order) -> str:
    # та же строка, что уходит в JSON: "2024-03-01T10:00:00Z"
    return _datetime_adapter.dump_python(order.created_at, mode="json")


def by_status(orders: Iterable[Order], status) -> List[Order]:
    return [o for o in orders if o.status == status]


def by_payment_status(orders: Iterable[Order], payment_status) -> List[Order]:
    return [o for o in orders if o.payment_status == payment_status]


def by_date(orders: Iterable[Order], date_prefix: str) -> List[Order]:
    """
    Заказы, у которых createdAt в JSON-виде (UTC, с "Z") начинается с date_prefix.
    Это строковый префикс, а не диапазон дат: "2024-03" вернёт весь март.
    """
    return [o for o in orders if _created_iso(o).startswith(date_prefix)]


def _sum_paid(orders: Iterable[Order]) -> Decimal:
    return sum(
        (o.amount for o in orders if o.payment_status == PaymentStatusEnum.paid),
        Decimal("0"),
    )


def daily_sales(orders: Iterable[Order], date_prefix: str) -> Decimal:
    return _sum_paid(by_date(orders, date_prefix))


def total_sales(orders: Iterable[Order]) -> Decimal:
    return _sum_paid(orders)


def _matches_search(order: Order, query: str) -> bool:
    query = query.lower()
    return (
        query in order.table.lower()
        or query in order.id.lower()
        or (order.customer_name is not None and query in order.customer_name.lower())
    )


def filter_orders(orders: Iterable[Order], filters: Optional[OrderFilters] = None) -> List[Order]:
    """
    Фильтрация и сортировка для списка заказов в панели владельца.
    Без sort_by порядок хранилища сохраняется.
    """
    result = list(orders)
    if filters is None:
        return result

    if filters.status is not None:
        result = by_status(result, filters.status)
    if filters.payment_status is not None:
        result = by_payment_status(result, filters.payment_status)
    if filters.date:
        result = by_date(result, filters.date)
    if filters.search:
        result = [o for o in result if _matches_search(o, filters.search)]

    # sorted() стабилен: при равных ключах остаётся порядок хранилища
    if filters.sort_by == "newest":
        result = sorted(result, key=lambda o: o.created_at, reverse=True)
    elif filters.sort_by == "oldest":
        result = sorted(result, key=lambda o: o.created_at)
    elif filters.sort_by == "highest":
        result = sorted(result, key=lambda o: o.amount, reverse=True)
    elif filters.sort_by == "lowest":
        result = sorted(result, key=lambda o: o.amount)

    return result


def growth_percentage(today: Decimal, yesterday: Decimal) -> float:
    if yesterday == 0:
        return 100.0 if today > 0 else 0.0
    return round(float((today - yesterday) / yesterday * 100), 2)


def order_stats(orders: Iterable[Order], day: date_type) -> OrderStats:
    """
    Сводка для дашборда:
    - количество заказов по статусам
    - общая и дневная выручка (только оплаченные)
    - средний чек по оплаченным заказам
    - рост дневной выручки относительно предыдущего дня
    """
    snapshot = list(orders)
    today_prefix = day.isoformat()
    yesterday_prefix = (day - timedelta(days=1)).isoformat()

    paid = by_payment_status(snapshot, PaymentStatusEnum.paid)
    total = total_sales(paid)
    today_total = daily_sales(paid, today_prefix)
    yesterday_total = daily_sales(paid, yesterday_prefix)
    average = (total / len(paid)).quantize(CENTS) if paid else Decimal("0")

    return OrderStats(
        date=today_prefix,
        total_orders=len(snapshot),
        pending_orders=len(by_status(snapshot, OrderStatusEnum.pending)),
        in_progress_orders=len(by_status(snapshot, OrderStatusEnum.in_progress)),
        completed_orders=len(by_status(snapshot, OrderStatusEnum.completed)),
        cancelled_orders=len(by_status(snapshot, OrderStatusEnum.cancelled)),
        total_sales=total,
        daily_sales=today_total,
        average_order_value=average,
        growth_percentage=growth_percentage(today_total, yesterday_total),
    )
