from typing import NamedTuple

from restaurant_orders.exceptions import InvalidTransition
from restaurant_orders.models.order import OrderStatusEnum


STATUS_TRANSITIONS: dict[OrderStatusEnum, frozenset[OrderStatusEnum]] = {
    OrderStatusEnum.pending: frozenset({OrderStatusEnum.in_progress, OrderStatusEnum.cancelled}),
    OrderStatusEnum.in_progress: frozenset({OrderStatusEnum.completed, OrderStatusEnum.cancelled}),
    OrderStatusEnum.completed: frozenset(),
    OrderStatusEnum.cancelled: frozenset(),
}

INITIAL_STATUS = OrderStatusEnum.pending
TERMINAL_STATUSES = frozenset(s for s, targets in STATUS_TRANSITIONS.items() if not targets)


class Transition(NamedTuple):
    from_status: OrderStatusEnum
    to_status: OrderStatusEnum


def allowed_transitions(status) -> frozenset[OrderStatusEnum]:
    """Для неизвестного статуса переходов нет."""
    try:
        return STATUS_TRANSITIONS[OrderStatusEnum(status)]
    except ValueError:
        return frozenset()


def is_valid_transition(from_status, to_status) -> bool:
    """
    True, если из from_status можно перейти в to_status за один шаг.
    Переход в тот же статус переходом не считается.
    """
    try:
        target = OrderStatusEnum(to_status)
    except ValueError:
        return False
    return target in allowed_transitions(from_status)


def check_transition(order, requested) -> Transition | InvalidTransition:
    """
    Чистая проверка смены статуса заказа.
    Отказ возвращается, а не бросается: как о нём сообщить, решает вызывающий.
    """
    current = OrderStatusEnum(order.status)
    if not is_valid_transition(current, requested):
        return InvalidTransition(current, requested)
    return Transition(current, OrderStatusEnum(requested))
