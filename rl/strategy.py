# rl/strategy.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Tuple
import threading
import numpy as np

from core.interfaces import Action
from core.snake_rules import GameState


class Strategy(ABC):
    """Maps (agent index, state) to an action and learns from transitions.

    One instance may be shared by every episode of a batch, so the public
    methods serialise on a per-strategy lock. Subclasses implement the
    underscore hooks and never take the lock themselves.
    """

    def __init__(self, n_actions: int, epsilon: float, gamma: float, alpha: float,
                 seed: Optional[int] = None):
        if not 1 <= n_actions <= len(Action):
            raise ValueError(f"n_actions must be in 1..{len(Action)}, got {n_actions}")
        self.n_actions = n_actions
        self.base_epsilon = epsilon
        self.epsilon = epsilon
        self.gamma = gamma
        self.alpha = alpha
        self.train_mode = True
        self.n_updates = 0
        self.rng = np.random.default_rng(seed)
        self._lock = threading.Lock()

    @property
    def actions(self) -> Tuple[Action, ...]:
        return tuple(Action(i) for i in range(self.n_actions))

    def set_train_mode(self, train: bool) -> None:
        with self._lock:
            self.train_mode = train
            self.epsilon = self.base_epsilon if train else 0.0

    def choose_action(self, idx: int, state: GameState) -> Action:
        with self._lock:
            return self._choose_action(idx, state)

    def update(self, idx: int, state: GameState, action: Action, next_state: GameState,
               reward: float, terminal: bool) -> None:
        with self._lock:
            self._update(idx, state, action, next_state, reward, terminal)
            self.n_updates += 1

    @abstractmethod
    def _choose_action(self, idx: int, state: GameState) -> Action: ...

    @abstractmethod
    def _update(self, idx: int, state: GameState, action: Action, next_state: GameState,
                reward: float, terminal: bool) -> None: ...

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(eps={self.base_epsilon}, gamma={self.gamma}, "
                f"alpha={self.alpha})")


class FixedActionStrategy(Strategy):
    """Always plays the same action and learns nothing."""

    def __init__(self, action: Action = Action.MOVE_DOWN, n_actions: int = len(Action)):
        super().__init__(n_actions, epsilon=0.0, gamma=0.0, alpha=0.0)
        self.action = action

    def _choose_action(self, idx: int, state: GameState) -> Action:
        return self.action

    def _update(self, idx, state, action, next_state, reward, terminal) -> None:
        pass
