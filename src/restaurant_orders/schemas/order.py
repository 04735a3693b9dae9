from pydantic import BaseModel, Field, PlainSerializer, StringConstraints, conint, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, List, Literal, Optional, Tuple
from datetime import datetime, timezone
from decimal import Decimal

from restaurant_orders.models.order import OrderStatusEnum, PaymentStatusEnum, PaymentMethodEnum


# Деньги храним в Decimal, а в JSON отдаём числом
Money = Annotated[
    Decimal,
    Field(ge=0, max_digits=10, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]
MoneyTotal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
TableLabel = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]


def _as_utc(value: datetime) -> datetime:
    # SQLite теряет tzinfo, считаем такие значения UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        coerce_numbers_to_str = True


class OrderItem(CamelModel):
    id: Annotated[str, StringConstraints(min_length=1, max_length=64)]
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)]
    quantity: conint(ge=1)
    price: Money
    category: str = ""
    description: Optional[str] = None

    class Config:
        frozen = True

    @classmethod
    def from_orm_row(cls, item):
        return cls(
            id=item.item_id,
            name=item.name,
            quantity=item.quantity,
            price=item.price,
            category=item.category or "",
            description=item.description,
        )


class Order(CamelModel):
    """
    Заказ в коллекции. Неизменяемый: поменять его можно только
    через менеджер, который собирает новый экземпляр.
    """

    id: str
    table: TableLabel
    items: Tuple[OrderItem, ...] = Field(min_length=1)
    amount: Money
    status: OrderStatusEnum = OrderStatusEnum.pending
    payment_status: PaymentStatusEnum = PaymentStatusEnum.pending
    special_instructions: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_id: Optional[str] = None
    payment_method: Optional[PaymentMethodEnum] = None
    estimated_time: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        frozen = True

    @field_validator("created_at", "updated_at")
    @classmethod
    def _timestamps_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @model_validator(mode="after")
    def _updated_not_before_created(self):
        if self.updated_at < self.created_at:
            raise ValueError("updatedAt must not be earlier than createdAt")
        return self

    @classmethod
    def from_orm_row(cls, order):
        return cls(
            id=order.id,
            table=order.table_number,
            items=[OrderItem.from_orm_row(i) for i in order.items],
            amount=order.amount,
            status=order.status,
            payment_status=order.payment_status,
            special_instructions=order.special_instructions,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            customer_id=order.customer_id,
            payment_method=order.payment_method,
            estimated_time=order.estimated_time,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderCreate(CamelModel):
    table: TableLabel
    items: List[OrderItem] = Field(min_length=1)
    amount: Money
    status: OrderStatusEnum = OrderStatusEnum.pending
    payment_status: PaymentStatusEnum = PaymentStatusEnum.pending
    special_instructions: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_id: Optional[str] = None
    payment_method: Optional[PaymentMethodEnum] = None
    estimated_time: Optional[str] = None

    class Config:
        extra = "forbid"


class OrderUpdate(CamelModel):
    """Частичное обновление: применяются только переданные поля."""

    status: Optional[OrderStatusEnum] = None
    payment_status: Optional[PaymentStatusEnum] = None
    items: Optional[List[OrderItem]] = None
    amount: Optional[Money] = None
    special_instructions: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_id: Optional[str] = None
    payment_method: Optional[PaymentMethodEnum] = None
    estimated_time: Optional[str] = None

    class Config:
        extra = "forbid"


SortOption = Literal["newest", "oldest", "highest", "lowest"]


class OrderFilters(CamelModel):
    status: Optional[OrderStatusEnum] = None
    payment_status: Optional[PaymentStatusEnum] = None
    date: Optional[str] = None  # префикс ISO-даты, например "2024-03-01"
    search: Optional[str] = None
    sort_by: Optional[SortOption] = None


class OrderStats(CamelModel):
    date: str
    total_orders: int
    pending_orders: int
    in_progress_orders: int
    completed_orders: int
    cancelled_orders: int
    total_sales: MoneyTotal
    daily_sales: MoneyTotal
    average_order_value: MoneyTotal
    growth_percentage: float


class SalesSummary(CamelModel):
    date: str
    daily_sales: MoneyTotal
    total_sales: MoneyTotal
