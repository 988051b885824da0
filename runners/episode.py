# runners/episode.py
from __future__ import annotations
from typing import Callable, List, Optional, Sequence, Tuple
import time

from config import AppConfig
from core.interfaces import Layout, Snapshot
from core.snake_rules import GameState, Rules
from rl.strategy import Strategy


class EpisodeRunner:
    """Owns one GameState and drives it with one strategy per snake."""

    def __init__(
        self,
        layout: Layout,
        strategies: Sequence[Strategy],
        cfg: AppConfig,
        train: bool = False,
        seed: Optional[int] = None,
        rules: Optional[Rules] = None,
    ):
        if len(strategies) != len(layout.snakes):
            raise ValueError(f"layout has {len(layout.snakes)} snakes but "
                             f"{len(strategies)} strategies were given")
        self.layout = layout
        self.strategies: List[Strategy] = list(strategies)
        self.cfg = cfg
        self.train = train
        self.seed = seed
        self.rules = rules or Rules(cfg)
        self.error: Optional[BaseException] = None
        self.init()

    def init(self) -> None:
        """(Re)build the state from the layout."""
        self.state = GameState.from_layout(
            self.layout, self.cfg.max_turns,
            random_first_apple=self.cfg.random_first_apple, seed=self.seed,
        )
        self.error = None

    @property
    def turn(self) -> int:
        return self.state.turn

    @property
    def terminated(self) -> bool:
        return self.state.terminated

    @property
    def scores(self) -> Tuple[int, ...]:
        return tuple(self.state.scores)

    def snapshot(self) -> Snapshot:
        return self.state.snapshot()

    def advance(self) -> Tuple[int, bool]:
        """Play one turn. Returns (turn, terminated)."""
        state = self.state
        if state.terminated:
            return state.turn, True

        alive = [i for i, s in enumerate(state.snakes) if not s.dead]
        actions: list = [None] * state.n_agents
        for i in alive:
            actions[i] = self.strategies[i].choose_action(i, state)

        prev = state.copy() if self.train else None
        self.rules.step(state, actions)

        if self.train:
            for i in alive:
                self.strategies[i].update(i, prev, actions[i], state,
                                          state.last_rewards[i], state.snakes[i].dead)
        return state.turn, state.terminated

    def run(self, delay: float = 0.0,
            on_tick: Optional[Callable[[Snapshot], None]] = None) -> Tuple[int, ...]:
        """Play until the turn limit or until every snake is dead."""
        while not self.state.terminated:
            self.advance()
            if on_tick is not None:
                on_tick(self.state.snapshot())
            if delay > 0:
                time.sleep(delay)
        return self.scores
