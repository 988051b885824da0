# core/snake_rules.py  (pure rules, no pygame)
from __future__ import annotations
from typing import List, Optional, Sequence
import random
import numpy as np
from .interfaces import (
    Action, Item, ItemType, Layout, OPPOSITE, Position, Snake, SnakeView, Snapshot,
)
from .geometry import is_action, move_head
from config import AppConfig

BONUS_ITEMS = (ItemType.BOX, ItemType.INVINCIBILITY_BALL, ItemType.SICK_BALL)

class GameState:
    """Everything one episode mutates. Never shared between episodes."""

    def __init__(self, size_x: int, size_y: int, walls: np.ndarray,
                 snakes: List[Snake], items: List[Item], max_turns: int,
                 seed: Optional[int] = None):
        self.size_x = size_x
        self.size_y = size_y
        self.walls = walls
        self.snakes = snakes
        self.items = items
        self.max_turns = max_turns
        self.turn = 0
        self.scores = [0] * len(snakes)
        self.last_rewards = [0] * len(snakes)
        self.rng = random.Random(seed)

    @classmethod
    def from_layout(cls, layout: Layout, max_turns: int,
                    random_first_apple: bool = False,
                    seed: Optional[int] = None) -> "GameState":
        layout.validate()
        walls = np.array(layout.walls, dtype=bool, copy=True)
        walls.setflags(write=False)
        snakes = [Snake(positions=[s.pos], id=i, last_action=s.last_action)
                  for i, s in enumerate(layout.snakes)]
        items = [Item(t, p) for t, p in layout.items]
        state = cls(layout.size_x, layout.size_y, walls, snakes, items, max_turns, seed)
        if random_first_apple:
            first = state.items.pop(0).item_type if state.items else ItemType.APPLE
            pos = state.random_free_cell()
            if pos is not None:
                state.items.insert(0, Item(first, pos))
        return state

    def copy(self) -> "GameState":
        # walls are read-only and can be shared
        other = GameState(self.size_x, self.size_y, self.walls,
                          [s.copy() for s in self.snakes],
                          [Item(i.item_type, i.pos) for i in self.items],
                          self.max_turns)
        other.turn = self.turn
        other.scores = list(self.scores)
        other.last_rewards = list(self.last_rewards)
        other.rng.setstate(self.rng.getstate())
        return other

    # ---- queries ----
    @property
    def n_agents(self) -> int:
        return len(self.snakes)

    @property
    def all_dead(self) -> bool:
        return all(s.dead for s in self.snakes)

    @property
    def terminated(self) -> bool:
        return self.turn >= self.max_turns or self.all_dead

    def is_wall(self, pos: Position) -> bool:
        return bool(self.walls[pos[0], pos[1]])

    def item_at(self, pos: Position) -> Optional[Item]:
        for item in self.items:
            if item.pos == pos:
                return item
        return None

    def is_legal_move(self, idx: int, action) -> bool:
        """No reversing onto the neck; dead snakes have no legal move."""
        snake = self.snakes[idx]
        if snake.dead or not is_action(action):
            return False
        if len(snake) > 1 and OPPOSITE[Action(action)] == snake.last_action:
            return False
        return True

    def free_cells(self) -> List[Position]:
        occ = {p for s in self.snakes for p in s.positions}
        occ.update(i.pos for i in self.items)
        return [(x, y) for y in range(self.size_y) for x in range(self.size_x)
                if not self.walls[x, y] and (x, y) not in occ]

    def random_free_cell(self) -> Optional[Position]:
        free = self.free_cells()
        return self.rng.choice(free) if free else None

    def snapshot(self) -> Snapshot:
        return Snapshot(
            turn=self.turn,
            max_turns=self.max_turns,
            size_x=self.size_x,
            size_y=self.size_y,
            walls=self.walls,
            items=tuple((i.item_type, i.pos) for i in self.items),
            snakes=tuple(SnakeView(tuple(s.positions), s.id, s.dead,
                                   s.invincible_timer, s.sick_timer)
                         for s in self.snakes),
            scores=tuple(self.scores),
            terminated=self.terminated,
        )


class Rules:
    """Transition engine: one synchronised move for every live snake."""

    def __init__(self, cfg: AppConfig):
        self.cfg = cfg

    def step(self, state: GameState, actions: Sequence) -> GameState:
        if state.terminated:
            return state
        if len(actions) != state.n_agents:
            raise ValueError(f"expected {state.n_agents} actions, got {len(actions)}")

        rewards = [0] * state.n_agents
        live: List[int] = []
        stepped: List[int] = []
        for idx, snake in enumerate(state.snakes):
            if snake.dead:
                continue
            action = actions[idx]
            # an unknown action leaves the whole snake where it is
            if is_action(action):
                if not state.is_legal_move(idx, action):
                    action = snake.last_action
                snake.last_action = Action(action)
                self._move(state, snake, action)
                stepped.append(idx)
            live.append(idx)

        for idx in stepped:
            rewards[idx] = self._consume(state, state.snakes[idx])

        self._resolve_collisions(state, live)

        for idx in live:
            snake = state.snakes[idx]
            if snake.invincible_timer > 0:
                snake.invincible_timer -= 1
            if snake.sick_timer > 0:
                snake.sick_timer -= 1

        for idx, r in enumerate(rewards):
            state.scores[idx] += r
        state.last_rewards = rewards
        state.turn += 1
        return state

    # ---- helpers ----
    def _move(self, state: GameState, snake: Snake, action) -> None:
        body = snake.positions
        snake.old_tail = body[-1]
        # tail first so no segment reads an already-overwritten neighbour
        for i in range(len(body) - 1, 0, -1):
            body[i] = body[i - 1]
        body[0] = move_head(body[0], action, state.size_x, state.size_y)

    def _consume(self, state: GameState, snake: Snake) -> int:
        item = state.item_at(snake.head)
        if item is None or snake.sick_timer > 0:
            return 0
        state.items.remove(item)
        if item.item_type == ItemType.APPLE:
            snake.positions.append(snake.old_tail)
            if self.cfg.respawn_apples:
                self._spawn(state, ItemType.APPLE)
            if self.cfg.bonus_item_prob > 0 and state.rng.random() < self.cfg.bonus_item_prob:
                self._spawn(state, state.rng.choice(BONUS_ITEMS))
            return self.cfg.apple_score
        if item.item_type == ItemType.BOX:
            return self.cfg.box_score
        if item.item_type == ItemType.INVINCIBILITY_BALL:
            snake.invincible_timer = self.cfg.invincible_turns
        elif item.item_type == ItemType.SICK_BALL:
            snake.sick_timer = self.cfg.sick_turns
        return 0

    def _spawn(self, state: GameState, item_type: ItemType) -> None:
        pos = state.random_free_cell()
        if pos is not None:
            state.items.append(Item(item_type, pos))

    def _resolve_collisions(self, state: GameState, live: List[int]) -> None:
        # decided against the positions after every head has moved
        killed: List[int] = []
        for idx in live:
            snake = state.snakes[idx]
            if snake.invincible_timer > 0:
                continue
            head = snake.head
            if state.is_wall(head) or head in snake.positions[1:]:
                killed.append(idx)
                continue
            for other in live:
                if other != idx and head in state.snakes[other].positions:
                    killed.append(idx)
                    break
        for idx in killed:
            state.snakes[idx].dead = True

