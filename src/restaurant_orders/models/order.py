import enum
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Enum as SAEnum
from sqlalchemy.orm import relationship
from ..db.base import Base


class OrderStatusEnum(str, enum.Enum):
    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"
    cancelled = "cancelled"


class PaymentStatusEnum(str, enum.Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"
    refunded = "refunded"


class PaymentMethodEnum(str, enum.Enum):
    cash = "cash"
    card = "card"
    upi = "upi"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True)
    position = Column(Integer, nullable=False, index=True)  # порядок в коллекции, 0 = самый новый
    table_number = Column(String(64), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(
        SAEnum(OrderStatusEnum, name="order_status", values_callable=_enum_values),
        nullable=False,
        default=OrderStatusEnum.pending,
    )
    payment_status = Column(
        SAEnum(PaymentStatusEnum, name="payment_status", values_callable=_enum_values),
        nullable=False,
        default=PaymentStatusEnum.pending,
    )
    payment_method = Column(
        SAEnum(PaymentMethodEnum, name="payment_method", values_callable=_enum_values),
        nullable=True,
    )
    special_instructions = Column(Text, nullable=True)
    customer_name = Column(String(128), nullable=True)
    customer_phone = Column(String(32), nullable=True)
    customer_id = Column(String(64), nullable=True)
    estimated_time = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    # связи
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )
