# rl/trainer.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from config import AppConfig
from core.interfaces import Layout
from runners.batch import BatchResult, launch_parallel_games, report
from .strategy import Strategy

BatchFn = Callable[[int, BatchResult, Sequence[Strategy]], None]

@dataclass
class TrainHooks:
    on_batch_end: Optional[BatchFn] = None
    on_visualize: Optional[Callable[[int], None]] = None


class BatchTrainer:
    """
    Outer loop: a test batch (epsilon 0, no learning) to measure the current
    policies, an optional rendered episode, then a train batch.
    """
    def __init__(
        self,
        cfg: AppConfig,
        layout: Layout,
        strategies: Sequence[Strategy],
        hooks: Optional[TrainHooks] = None,
    ):
        if len(strategies) != len(layout.snakes):
            raise ValueError(f"layout has {len(layout.snakes)} snakes but "
                             f"{len(strategies)} strategies were given")
        self.cfg = cfg
        self.layout = layout
        self.strategies = list(strategies)
        self.hooks = hooks or TrainHooks()

    def _seed(self, cycle: int, train: bool) -> Optional[int]:
        if self.cfg.seed is None:
            return None
        # disjoint episode seeds for every batch
        per_batch = self.cfg.n_test + self.cfg.n_train
        return self.cfg.seed + cycle * per_batch + (self.cfg.n_test if train else 0)

    def run_batch(self, cycle: int, train: bool) -> BatchResult:
        n = self.cfg.n_train if train else self.cfg.n_test
        result = launch_parallel_games(n, self.layout, self.strategies, self.cfg,
                                       train=train, seed=self._seed(cycle, train))
        report(result, self.strategies)
        if self.hooks.on_batch_end:
            self.hooks.on_batch_end(cycle, result, self.strategies)
        return result

    def train(self, cycles: Optional[int] = None) -> List[BatchResult]:
        """Returns the test-batch results, one per cycle."""
        cycles = self.cfg.cycles if cycles is None else cycles
        tests: List[BatchResult] = []
        for cycle in range(cycles):
            print(f"[cycle {cycle}] compute score in test mode")
            tests.append(self.run_batch(cycle, train=False))

            if (self.hooks.on_visualize and self.cfg.viz_every
                    and cycle % self.cfg.viz_every == 0):
                print(f"[cycle {cycle}] visualization mode")
                self.hooks.on_visualize(cycle)

            print(f"[cycle {cycle}] play and collect examples - train mode")
            self.run_batch(cycle, train=True)
        return tests

    def evaluate(self) -> BatchResult:
        """One greedy batch, no learning."""
        return self.run_batch(-1, train=False)
