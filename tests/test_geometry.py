# tests/test_geometry.py
import pytest
from core.geometry import is_action, is_next_to, move_head, simulate_step, torus_distance
from core.interfaces import Action

@pytest.mark.parametrize("head, action, expected", [
    ((0, 2), Action.MOVE_LEFT, (7, 2)),
    ((7, 2), Action.MOVE_RIGHT, (0, 2)),
    ((3, 0), Action.MOVE_UP, (3, 5)),
    ((3, 5), Action.MOVE_DOWN, (3, 0)),
    ((3, 3), Action.MOVE_UP, (3, 2)),
    ((3, 3), Action.MOVE_RIGHT, (4, 3)),
])
def test_move_head_wraps_on_torus(head, action, expected):
    assert move_head(head, action, 8, 6) == expected

def test_unknown_action_leaves_head():
    assert move_head((3, 3), "jump", 8, 6) == (3, 3)
    assert move_head((3, 3), None, 8, 6) == (3, 3)
    assert move_head((3, 3), 17, 8, 6) == (3, 3)
    assert not is_action("jump")
    assert not is_action([1])
    assert is_action(2)

def test_simulate_step_shifts_body_without_aliasing():
    body = [(3, 3), (2, 3), (1, 3)]
    out = simulate_step(body, Action.MOVE_DOWN, 8, 6)
    assert out == ((3, 4), (3, 3), (2, 3))
    assert body == [(3, 3), (2, 3), (1, 3)]  # input untouched

def test_simulate_step_grow_keeps_tail():
    out = simulate_step(((3, 3), (2, 3)), Action.MOVE_RIGHT, 8, 6, grow=True)
    assert out == ((4, 3), (3, 3), (2, 3))

def test_simulate_step_single_segment():
    assert simulate_step(((0, 0),), Action.MOVE_LEFT, 8, 6) == ((7, 0),)

def test_torus_distance_and_adjacency():
    assert torus_distance((0, 0), (7, 0), 8, 6) == 1
    assert torus_distance((0, 0), (4, 3), 8, 6) == 7
    assert torus_distance((1, 1), (6, 5), 8, 6) == 3 + 2
    assert is_next_to((0, 0), (0, 5), 8, 6)
    assert not is_next_to((0, 0), (1, 1), 8, 6)
    assert not is_next_to((2, 2), (2, 2), 8, 6)
