from datetime import datetime, timezone
from typing import List, Optional, Sequence
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_orders.models import Order, OrderItem, StoreState
from restaurant_orders.schemas.order import Order as OrderSchema


async def get_store_state(db: AsyncSession, key: str) -> Optional[StoreState]:
    """
    Возвращает отметку о последнем сохранении коллекции.
    None означает, что коллекция ни разу не сохранялась.
    """
    return await db.get(StoreState, key)


async def get_orders(db: AsyncSession) -> List[OrderSchema]:
    """
    Возвращает все заказы в порядке коллекции (position, новые первыми).
    Подгружаем items, чтобы не было lazy load.
    """
    stmt = (
        select(Order)
        .options(selectinload(Order.items))
        .order_by(Order.position)
    )
    result = await db.execute(stmt)
    return [OrderSchema.from_orm_row(o) for o in result.scalars().unique().all()]


def _to_row(order: OrderSchema, position: int) -> Order:
    return Order(
        id=order.id,
        position=position,
        table_number=order.table,
        amount=order.amount,
        status=order.status,
        payment_status=order.payment_status,
        payment_method=order.payment_method,
        special_instructions=order.special_instructions,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        customer_id=order.customer_id,
        estimated_time=order.estimated_time,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=[
            OrderItem(
                item_id=item.id,
                position=i,
                name=item.name,
                quantity=item.quantity,
                price=item.price,
                category=item.category,
                description=item.description,
            )
            for i, item in enumerate(order.items)
        ],
    )


async def replace_orders(db: AsyncSession, orders: Sequence[OrderSchema], key: str) -> None:
    """
    Полностью перезаписывает коллекцию заказов одной транзакцией.
    """
    await db.execute(delete(OrderItem))
    await db.execute(delete(Order))

    db.add_all([_to_row(order, position) for position, order in enumerate(orders)])

    # Отмечаем, что коллекция сохранена (даже если она пустая)
    await db.merge(
        StoreState(key=key, order_count=len(orders), saved_at=datetime.now(timezone.utc))
    )

    await db.commit()
