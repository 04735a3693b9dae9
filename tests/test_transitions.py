import pytest

from restaurant_orders.exceptions import InvalidTransition
from restaurant_orders.models.order import OrderStatusEnum
from restaurant_orders.transitions import (
    INITIAL_STATUS,
    STATUS_TRANSITIONS,
    TERMINAL_STATUSES,
    Transition,
    allowed_transitions,
    check_transition,
    is_valid_transition,
)
from restaurant_orders.seed import demo_orders

ALL_STATUSES = list(OrderStatusEnum)

LEGAL = {
    ("pending", "in-progress"),
    ("pending", "cancelled"),
    ("in-progress", "completed"),
    ("in-progress", "cancelled"),
}


@pytest.mark.parametrize("from_status", [s.value for s in ALL_STATUSES])
@pytest.mark.parametrize("to_status", [s.value for s in ALL_STATUSES])
def test_transition_table(from_status, to_status):
    assert is_valid_transition(from_status, to_status) is ((from_status, to_status) in LEGAL)


@pytest.mark.parametrize("terminal", ["completed", "cancelled"])
def test_terminal_states_are_sinks(terminal):
    assert not any(is_valid_transition(terminal, s) for s in ALL_STATUSES)
    assert allowed_transitions(terminal) == frozenset()


def test_unknown_statuses_are_rejected_without_raising():
    assert is_valid_transition("bogus", "pending") is False
    assert is_valid_transition("bogus", "ready") is False
    assert allowed_transitions("bogus") == frozenset()


def test_self_transition_rejected():
    for status in ALL_STATUSES:
        assert not is_valid_transition(status, status)


def test_initial_and_terminal_sets():
    assert INITIAL_STATUS == OrderStatusEnum.pending
    assert TERMINAL_STATUSES == {OrderStatusEnum.completed, OrderStatusEnum.cancelled}
    assert set(STATUS_TRANSITIONS) == set(ALL_STATUSES)


def test_unknown_target_is_invalid():
    assert not is_valid_transition("pending", "ready")


def test_check_transition_returns_rejection_without_raising():
    order = demo_orders()[0]  # pending
    rejected = check_transition(order, "completed")
    assert isinstance(rejected, InvalidTransition)
    assert rejected.from_status == OrderStatusEnum.pending
    assert rejected.to_status == "completed"
    assert "pending" in str(rejected) and "completed" in str(rejected)

    accepted = check_transition(order, OrderStatusEnum.in_progress)
    assert accepted == Transition(OrderStatusEnum.pending, OrderStatusEnum.in_progress)
    # чистая функция: заказ не изменился
    assert order.status == OrderStatusEnum.pending
