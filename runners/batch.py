# runners/batch.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import threading
import time

from config import AppConfig
from core.interfaces import Layout
from rl.strategy import Strategy
from .episode import EpisodeRunner


class BatchError(RuntimeError):
    """Every episode of a batch failed."""


@dataclass(frozen=True)
class BatchResult:
    train: bool
    requested: int
    completed: int
    failed: int
    avg_scores: Tuple[float, ...]                  # per agent slot, over completed episodes
    episode_scores: Tuple[Tuple[int, ...], ...]
    total_turns: int
    elapsed_s: float


def _play(runner: EpisodeRunner) -> None:
    # the failure is kept on the runner and reported after the join
    try:
        runner.run()
    except Exception as e:
        runner.error = e


def launch_parallel_games(
    n_games: int,
    layout: Layout,
    strategies: Sequence[Strategy],
    cfg: AppConfig,
    train: bool,
    seed: Optional[int] = None,
) -> BatchResult:
    """Run n_games episodes on their own threads, join all, average per slot.

    Strategies are shared by every episode; game states are not. Failed
    episodes are left out of the averages.
    """
    if n_games <= 0:
        raise ValueError(f"n_games must be positive, got {n_games}")
    layout.validate()
    if len(strategies) != len(layout.snakes):
        raise ValueError(f"layout has {len(layout.snakes)} snakes but "
                         f"{len(strategies)} strategies were given")

    for s in strategies:
        s.set_train_mode(train)

    t0 = time.perf_counter()
    runners = [
        EpisodeRunner(layout, strategies, cfg, train=train,
                      seed=None if seed is None else seed + i)
        for i in range(n_games)
    ]
    threads = [
        threading.Thread(target=_play, args=(r,), name=f"episode-{i}", daemon=True)
        for i, r in enumerate(runners)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ok = [r for r in runners if r.error is None]
    bad = [r for r in runners if r.error is not None]
    for i, r in enumerate(runners):
        if r.error is not None:
            print(f"[batch] episode {i} failed: {type(r.error).__name__}: {r.error}")
    if not ok:
        raise BatchError(f"all {n_games} episodes failed") from bad[0].error

    n_slots = len(strategies)
    totals = [0.0] * n_slots
    for r in ok:
        for j, sc in enumerate(r.scores):
            totals[j] += sc

    return BatchResult(
        train=train,
        requested=n_games,
        completed=len(ok),
        failed=len(bad),
        avg_scores=tuple(t / len(ok) for t in totals),
        episode_scores=tuple(r.scores for r in ok),
        total_turns=sum(r.turn for r in ok),
        elapsed_s=time.perf_counter() - t0,
    )


def phase_name(train: bool) -> str:
    return "train" if train else "test"


def report(result: BatchResult, strategies: Sequence[Strategy]) -> List[str]:
    lines = []
    label = phase_name(result.train).capitalize()
    for j, s in enumerate(strategies):
        lines.append(f"{label} - agent {j} - strategy {s!r} average global score : "
                     f"{result.avg_scores[j]:.3f}")
    if result.failed:
        lines.append(f"{label} - {result.failed}/{result.requested} episodes failed")
    for line in lines:
        print(line)
    return lines
