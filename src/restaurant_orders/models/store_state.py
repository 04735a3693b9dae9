from sqlalchemy import Column, Integer, String, DateTime
from ..db.base import Base


class StoreState(Base):
    """Отметка о том, что коллекция заказов хотя бы раз сохранялась."""

    __tablename__ = "store_state"

    key = Column(String(64), primary_key=True)
    order_count = Column(Integer, nullable=False, default=0)
    saved_at = Column(DateTime(timezone=True), nullable=False)
