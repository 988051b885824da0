# core/interfaces.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Tuple, List, Optional
import numpy as np

Position = Tuple[int, int]

class Action(IntEnum):
    MOVE_UP = 0
    MOVE_DOWN = 1
    MOVE_LEFT = 2
    MOVE_RIGHT = 3

OPPOSITE = {
    Action.MOVE_UP: Action.MOVE_DOWN,
    Action.MOVE_DOWN: Action.MOVE_UP,
    Action.MOVE_LEFT: Action.MOVE_RIGHT,
    Action.MOVE_RIGHT: Action.MOVE_LEFT,
}

class ItemType(IntEnum):
    APPLE = 0
    BOX = 1
    INVINCIBILITY_BALL = 2
    SICK_BALL = 3

@dataclass
class Item:
    item_type: ItemType
    pos: Position

@dataclass
class Snake:
    positions: List[Position]           # head first
    id: int
    last_action: Action = Action.MOVE_RIGHT
    invincible_timer: int = 0
    sick_timer: int = 0
    dead: bool = False
    old_tail: Optional[Position] = None

    @property
    def head(self) -> Position:
        return self.positions[0]

    def __len__(self) -> int:
        return len(self.positions)

    def copy(self) -> "Snake":
        return Snake(
            positions=list(self.positions),
            id=self.id,
            last_action=self.last_action,
            invincible_timer=self.invincible_timer,
            sick_timer=self.sick_timer,
            dead=self.dead,
            old_tail=self.old_tail,
        )

@dataclass(frozen=True)
class SnakeStart:
    pos: Position
    last_action: Action = Action.MOVE_RIGHT

@dataclass(frozen=True)
class Layout:
    """Parsed map: what a game needs to start, never mutated."""
    size_x: int
    size_y: int
    walls: np.ndarray                   # bool, shape (size_x, size_y), indexed [x, y]
    snakes: Tuple[SnakeStart, ...]
    items: Tuple[Tuple[ItemType, Position], ...] = field(default_factory=tuple)

    def validate(self) -> None:
        if self.size_x <= 0 or self.size_y <= 0:
            raise ValueError(f"layout size must be positive, got {self.size_x}x{self.size_y}")
        if self.walls.shape != (self.size_x, self.size_y):
            raise ValueError(f"wall mask shape {self.walls.shape} != ({self.size_x}, {self.size_y})")
        if not self.snakes:
            raise ValueError("layout has no snakes")
        occupied = set()
        for s in self.snakes:
            self._check_cell(s.pos, "snake")
            if s.pos in occupied:
                raise ValueError(f"two snakes start on {s.pos}")
            occupied.add(s.pos)
        for _, p in self.items:
            self._check_cell(p, "item")

    def _check_cell(self, p: Position, what: str) -> None:
        x, y = p
        if not (0 <= x < self.size_x and 0 <= y < self.size_y):
            raise ValueError(f"{what} at {p} is outside the {self.size_x}x{self.size_y} grid")
        if self.walls[x, y]:
            raise ValueError(f"{what} at {p} is on a wall")

@dataclass(frozen=True)
class SnakeView:
    positions: Tuple[Position, ...]
    id: int
    dead: bool
    invincible_timer: int
    sick_timer: int

@dataclass(frozen=True)
class Snapshot:
    turn: int
    max_turns: int
    size_x: int
    size_y: int
    walls: np.ndarray
    items: Tuple[Tuple[ItemType, Position], ...]
    snakes: Tuple[SnakeView, ...]
    scores: Tuple[int, ...]
    terminated: bool
