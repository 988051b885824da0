# rl/tabular_q.py
from __future__ import annotations
from typing import Dict, List
import numpy as np

from core.interfaces import Action, ItemType
from core.snake_rules import GameState
from .strategy import Strategy

WALL, EMPTY, HEAD = "#", ".", "H"
OTHER_HEAD, OTHER_BODY, DEAD_HEAD, DEAD_BODY = "E", "e", "D", "d"
ITEM_TOKENS = {
    ItemType.APPLE: "A",
    ItemType.BOX: "K",
    ItemType.INVINCIBILITY_BALL: "I",
    ItemType.SICK_BALL: "S",
}
SEP = ","
JOIN = "+"


class TabularQLearning(Strategy):
    """One-step Q-learning over whole-grid keys."""

    def __init__(self, n_actions: int, epsilon: float, gamma: float, alpha: float, seed=None):
        super().__init__(n_actions, epsilon, gamma, alpha, seed)
        self.Q: Dict[str, np.ndarray] = {}

    def encode_state(self, idx: int, state: GameState) -> str:
        """One token per cell, row-major, joined with a separator.

        A cell token lists everything on the cell in a fixed order (wall,
        other snakes, own body, own head, item) joined with '+', so an item
        under a sick head or a snake lying on a dead one is still visible.
        Segments carry their index and other snakes their slot, so bodies
        folded into the same cells in a different order stay distinguishable.
        """
        cells: List[List[List[str]]] = [[[] for _ in range(state.size_x)]
                                        for _ in range(state.size_y)]
        for x, y in zip(*state.walls.nonzero()):
            cells[y][x].append(WALL)

        for j, other in enumerate(state.snakes):
            if j == idx:
                continue
            head_tok, body_tok = (DEAD_HEAD, DEAD_BODY) if other.dead else (OTHER_HEAD, OTHER_BODY)
            for k, (x, y) in enumerate(other.positions):
                cells[y][x].append(f"{head_tok}{j}" if k == 0 else f"{body_tok}{j}.{k}")

        snake = state.snakes[idx]
        for k, (x, y) in enumerate(snake.positions[1:], start=1):
            cells[y][x].append(f"b{k}")
        hx, hy = snake.head
        cells[hy][hx].append(HEAD)

        for item in state.items:
            x, y = item.pos
            cells[y][x].append(ITEM_TOKENS[item.item_type])

        return SEP.join(JOIN.join(parts) if parts else EMPTY for row in cells for parts in row)

    def q_values(self, key: str) -> np.ndarray:
        q = self.Q.get(key)
        if q is None:
            q = np.zeros(self.n_actions, dtype=np.float64)
            self.Q[key] = q
        return q

    def _choose_action(self, idx: int, state: GameState) -> Action:
        q = self.q_values(self.encode_state(idx, state))
        if self.rng.random() < self.epsilon:
            return self.actions[int(self.rng.integers(self.n_actions))]
        # np.argmax keeps the first index on ties
        return self.actions[int(np.argmax(q))]

    def _update(self, idx, state, action, next_state, reward, terminal) -> None:
        q = self.q_values(self.encode_state(idx, state))
        q_next = self.q_values(self.encode_state(idx, next_state))
        max_next = 0.0 if terminal else float(q_next.max())
        a = int(action)
        q[a] += self.alpha * (reward + self.gamma * max_next - q[a])
