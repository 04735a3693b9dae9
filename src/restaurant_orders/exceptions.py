class OrderError(Exception):
    """Базовая ошибка жизненного цикла заказа, не фатальная для процесса."""


class InvalidTransition(OrderError, ValueError):
    """Запрошенная смена статуса не разрешена из текущего статуса."""

    def __init__(self, from_status, to_status):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid status transition from {_value(from_status)} to {_value(to_status)}"
        )


class OrderNotFound(OrderError, LookupError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order with id={order_id} not found")


class ValidationFailure(OrderError, ValueError):
    """Входные данные нарушают инвариант заказа, ничего не изменено."""

    def __init__(self, message: str, errors: list | None = None):
        self.errors = errors or []
        super().__init__(message)


class PersistenceFailure(OrderError, RuntimeError):
    """
    Не удалось записать в хранилище.
    Изменение в памяти остаётся, но может не пережить перезапуск.
    """


def _value(status) -> str:
    return getattr(status, "value", status)
