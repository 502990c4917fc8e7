import pytest

from cabin import CapacityExceeded, CapacityGuard, ElevatorConfig, WeightExceeded


@pytest.fixture
def guard():
    return CapacityGuard(ElevatorConfig(capacity=4, max_weight=600.0))


def test_can_board_checks_both_limits(guard):
    assert guard.can_board(4, 600.0)
    assert not guard.can_board(5, 100.0)
    assert not guard.can_board(1, 600.5)


def test_board_applies_deltas(guard):
    guard.board(2, 300.0)
    assert guard.current_load == 2
    assert guard.current_weight == 300.0
    assert guard.can_board(2, 300.0)
    assert not guard.can_board(3, 10.0)


def test_board_rejects_without_partial_apply(guard):
    guard.board(3, 200.0)
    with pytest.raises(CapacityExceeded):
        guard.board(2, 50.0)
    with pytest.raises(WeightExceeded):
        guard.board(1, 450.0)
    assert guard.current_load == 3
    assert guard.current_weight == 200.0


def test_unboard_and_reset(guard):
    guard.board(2, 310.2)
    guard.unboard(160.1)
    assert guard.current_load == 1
    assert guard.current_weight == pytest.approx(150.1)
    guard.unboard(150.1)
    assert guard.current_load == 0
    assert guard.current_weight == 0.0
    guard.board(1, 90.0)
    guard.reset()
    assert (guard.current_load, guard.current_weight) == (0, 0.0)
