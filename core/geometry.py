# core/geometry.py  (pure torus helpers, no game state)
from __future__ import annotations
from typing import Sequence, Tuple
from .interfaces import Action, Position

DELTAS = {
    Action.MOVE_UP: (0, -1),
    Action.MOVE_DOWN: (0, 1),
    Action.MOVE_LEFT: (-1, 0),
    Action.MOVE_RIGHT: (1, 0),
}

def is_action(action) -> bool:
    try:
        return action in DELTAS
    except TypeError:
        return False

def move_head(head: Position, action, size_x: int, size_y: int) -> Position:
    """Unit move on the torus. Unknown actions leave the head where it is."""
    try:
        dx, dy = DELTAS[action]
    except (KeyError, TypeError):
        return head
    return ((head[0] + dx) % size_x, (head[1] + dy) % size_y)

def simulate_step(body: Sequence[Position], action, size_x: int, size_y: int,
                  grow: bool = False) -> Tuple[Position, ...]:
    """Body after one move, computed on a copy.

    Every segment takes the place of its forward neighbour and the head moves
    by `action`. With grow=True the old tail is kept, as after eating an apple.
    """
    body = tuple(body)
    if not body:
        return body
    new_head = move_head(body[0], action, size_x, size_y)
    tail = body if grow else body[:-1]
    return (new_head,) + tail

def torus_distance(a: Position, b: Position, size_x: int, size_y: int) -> int:
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    return min(dx, size_x - dx) + min(dy, size_y - dy)

def is_next_to(a: Position, b: Position, size_x: int, size_y: int) -> bool:
    return torus_distance(a, b, size_x, size_y) == 1
