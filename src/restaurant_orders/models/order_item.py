from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from ..db.base import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(String(64), nullable=False)  # идентификатор позиции внутри заказа
    position = Column(Integer, nullable=False)
    name = Column(String(128), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(10, 2), nullable=False)  # фиксируется на момент заказа
    category = Column(String(64), nullable=False, default="")
    description = Column(Text, nullable=True)

    # связи
    order = relationship("Order", back_populates="items")
