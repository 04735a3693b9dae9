from .order import Order, OrderStatusEnum, PaymentStatusEnum, PaymentMethodEnum
from .order_item import OrderItem
from .store_state import StoreState

__all__ = [
    "Order",
    "OrderStatusEnum",
    "PaymentStatusEnum",
    "PaymentMethodEnum",
    "OrderItem",
    "StoreState",
]
