from datetime import date as date_type
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response
from fastapi.encoders import jsonable_encoder

from restaurant_orders.api.deps import get_order_manager
from restaurant_orders.exceptions import InvalidTransition, OrderNotFound, ValidationFailure
from restaurant_orders.manager import OrderLifecycleManager
from restaurant_orders.models.order import OrderStatusEnum, PaymentStatusEnum
from restaurant_orders.schemas.order import (
    Order, OrderCreate, OrderFilters, OrderStats, OrderUpdate, SalesSummary, SortOption,
)
from restaurant_orders.transitions import allowed_transitions


router = APIRouter(prefix="/orders", tags=["orders"])

NOT_PERSISTED_WARNING = '199 - "order state not persisted"'


def _flag_persistence(response: Response, manager: OrderLifecycleManager) -> None:
    if manager.persistence_error is not None:
        response.headers["Warning"] = NOT_PERSISTED_WARNING


def _validation_error(e: ValidationFailure) -> HTTPException:
    return HTTPException(status_code=422, detail={"message": str(e), "errors": jsonable_encoder(e.errors)})


@router.get("", response_model=List[Order])
async def list_orders(
    status: Optional[OrderStatusEnum] = Query(None, description="Фильтр по статусу"),
    payment_status: Optional[PaymentStatusEnum] = Query(None, alias="paymentStatus", description="Фильтр по оплате"),
    date: Optional[str] = Query(None, description="Префикс даты создания (YYYY-MM-DD)"),
    search: Optional[str] = Query(None, description="Поиск по столу, id или имени клиента"),
    sort_by: Optional[SortOption] = Query(None, alias="sortBy", description="newest | oldest | highest | lowest"),
    manager: OrderLifecycleManager = Depends(get_order_manager),
):
    """
    Возвращает список заказов.
    Поддерживает фильтрацию по статусу, оплате, дате и поиск с сортировкой.
    Без sortBy порядок хранилища (новые первыми).
    """
    filters = OrderFilters(
        status=status, payment_status=payment_status, date=date, search=search, sort_by=sort_by
    )
    return manager.filter_orders(filters)


@router.get("/stats", response_model=OrderStats)
async def get_orders_stats_endpoint(
    date: Optional[str] = Query(None, description="День (YYYY-MM-DD), по умолчанию сегодня (UTC)"),
    manager: OrderLifecycleManager = Depends(get_order_manager),
):
    """
    Сводная статистика для дашборда:
    - количество заказов по статусам
    - общая и дневная выручка
    - средний чек
    - рост дневной выручки к предыдущему дню
    """
    try:
        day = date_type.fromisoformat(date) if date else None
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date: {date}")
    return manager.stats(day)


@router.get("/sales", response_model=SalesSummary)
async def get_sales_endpoint(
    date: str = Query(..., description="Префикс даты (YYYY-MM-DD)"),
    manager: OrderLifecycleManager = Depends(get_order_manager),
):
    """
    Выручка по оплаченным заказам: за день (по префиксу даты) и за всё время.
    """
    return SalesSummary(
        date=date,
        daily_sales=manager.daily_sales(date),
        total_sales=manager.total_sales(),
    )


@router.get("/{order_id}", response_model=Order)
async def get_order(
    order_id: str = Path(..., description="ID заказа"),
    manager: OrderLifecycleManager = Depends(get_order_manager),
):
    """
    Возвращает заказ по id.
    """
    try:
        return manager.get_order(order_id)
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="Order not found")


@router.post("", response_model=Order, status_code=201)
async def create_order_endpoint(
    order_in: OrderCreate,
    response: Response,
    manager: OrderLifecycleManager = Depends(get_order_manager),
):
    """
    Возвращает созданный заказ.
    """
    try:
        order = await manager.create_order(order_in)
    except ValidationFailure as e:
        raise _validation_error(e)

    _flag_persistence(response, manager)
    return order


@router.patch("/{order_id}", response_model=Order)
async def patch_order_endpoint(
    order_id: str,
    order_in: OrderUpdate,
    response: Response,
    manager: OrderLifecycleManager = Depends(get_order_manager),
):
    """
    Частичное обновление заказа.
    Поддерживаемые поля: status, paymentStatus, items, amount, specialInstructions,
    customerName, customerPhone, customerId, paymentMethod, estimatedTime.
    Недопустимая смена статуса → 409, заказ не меняется.
    """
    try:
        order = await manager.update_order(order_id, order_in)
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="Order not found")
    except InvalidTransition as e:
        raise HTTPException(
            status_code=409,
            detail=jsonable_encoder({
                "message": str(e),
                "from": e.from_status,
                "to": e.to_status,
                "allowed": sorted(allowed_transitions(e.from_status)),
            }),
        )
    except ValidationFailure as e:
        raise _validation_error(e)

    _flag_persistence(response, manager)
    return order


@router.delete("/{order_id}", status_code=204)
async def remove_order(
    order_id: str,
    response: Response,
    manager: OrderLifecycleManager = Depends(get_order_manager),
):
    """
    Удаляет заказ. Повторное удаление не ошибка.
    """
    await manager.delete_order(order_id)
    _flag_persistence(response, manager)
