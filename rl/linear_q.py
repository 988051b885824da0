# rl/linear_q.py
from __future__ import annotations
from typing import List
import numpy as np

from core.geometry import is_next_to, move_head, simulate_step, torus_distance
from core.interfaces import Action, ItemType
from core.snake_rules import GameState
from .strategy import Strategy

NUM_FEATURES = 4
DEFAULT_ACTION = Action.MOVE_UP


class LinearApproximationQLearning(Strategy):
    """Q(s, a) = w . f(s, a) with four hand-made features.

    Features, computed on a simulated copy of the body:
      0: bias
      1: number of items next to the new head
      2: closeness of the nearest item, 1 - min(1, d / (size_x + size_y))
      3: 1 if the new head touches no own segment past the first two
    """

    def __init__(self, n_actions: int, epsilon: float, gamma: float, alpha: float, seed=None):
        super().__init__(n_actions, epsilon, gamma, alpha, seed)
        self.weights = self.rng.random(NUM_FEATURES)

    # ---- features ----
    def features(self, idx: int, state: GameState, action) -> np.ndarray:
        snake = state.snakes[idx]
        sx, sy = state.size_x, state.size_y
        head = move_head(snake.head, action, sx, sy)
        item = state.item_at(head)
        grow = item is not None and item.item_type == ItemType.APPLE
        body = simulate_step(snake.positions, action, sx, sy, grow=grow)

        f = np.zeros(NUM_FEATURES, dtype=np.float64)
        f[0] = 1.0
        f[1] = float(sum(1 for it in state.items if is_next_to(head, it.pos, sx, sy)))
        if state.items:
            nearest = min(torus_distance(head, it.pos, sx, sy) for it in state.items)
            f[2] = 1.0 - min(1.0, nearest / (sx + sy))
        f[3] = 0.0 if any(is_next_to(head, p, sx, sy) for p in body[2:]) else 1.0
        return f

    def q_value(self, idx: int, state: GameState, action) -> float:
        return float(np.dot(self.weights, self.features(idx, state, action)))

    # ---- legality ----
    def is_safe_move(self, idx: int, state: GameState, action) -> bool:
        """False if the simulated head lands on the simulated body."""
        body = simulate_step(state.snakes[idx].positions, action, state.size_x, state.size_y)
        return body[0] not in body[1:]

    def legal_actions(self, idx: int, state: GameState) -> List[Action]:
        return [a for a in self.actions
                if state.is_legal_move(idx, a) and self.is_safe_move(idx, state, a)]

    # ---- Strategy hooks ----
    def _choose_action(self, idx: int, state: GameState) -> Action:
        legal = self.legal_actions(idx, state)
        if not legal:
            return DEFAULT_ACTION
        if self.rng.random() < self.epsilon:
            return legal[int(self.rng.integers(len(legal)))]
        best, best_q = legal[0], -np.inf
        for a in legal:
            q = self.q_value(idx, state, a)
            if q > best_q:
                best, best_q = a, q
        return best

    def _update(self, idx, state, action, next_state, reward, terminal) -> None:
        f = self.features(idx, state, action)
        q = float(np.dot(self.weights, f))

        q_next = 0.0
        if not terminal:
            legal = self.legal_actions(idx, next_state)
            if legal:
                q_next = max(self.q_value(idx, next_state, a) for a in legal)

        td_error = reward + self.gamma * q_next - q
        self.weights += self.alpha * td_error * f
