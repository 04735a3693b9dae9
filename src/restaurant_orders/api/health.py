from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from .deps import get_order_manager
from ..manager import OrderLifecycleManager

router = APIRouter()

@router.get("/health", summary="Health check")
async def health_check(manager: OrderLifecycleManager = Depends(get_order_manager)):
    """
    Простейший health-check эндпоинт.
    persisted=False означает, что последнее изменение не попало в хранилище.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc),
        "orders": len(manager.orders),
        "persisted": manager.persistence_error is None,
    }
