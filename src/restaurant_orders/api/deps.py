from fastapi import Request

from restaurant_orders.manager import OrderLifecycleManager


def get_order_manager(request: Request) -> OrderLifecycleManager:
    """
    Менеджер заказов создаётся в lifespan и живёт в app.state.
    Использовать в Depends(get_order_manager).
    """
    return request.app.state.order_manager
