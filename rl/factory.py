# rl/factory.py
from __future__ import annotations
from typing import List, Optional
from config import AppConfig
from .strategy import Strategy
from .tabular_q import TabularQLearning
from .linear_q import LinearApproximationQLearning

STRATEGIES = {
    "tabular": TabularQLearning,
    "linear": LinearApproximationQLearning,
}

def make_strategy(cfg: AppConfig, seed: Optional[int] = None) -> Strategy:
    try:
        cls = STRATEGIES[cfg.strategy]
    except KeyError:
        raise ValueError(f"unknown strategy {cfg.strategy!r}; choose from {sorted(STRATEGIES)}") from None
    return cls(cfg.n_actions, cfg.epsilon, cfg.gamma, cfg.alpha, seed=seed)

def make_strategies(cfg: AppConfig, n_agents: int) -> List[Strategy]:
    """One independent strategy per agent slot."""
    base = cfg.seed
    return [make_strategy(cfg, None if base is None else base + i) for i in range(n_agents)]
