# rl/metrics.py
from __future__ import annotations
from collections import deque
from typing import Deque, Dict, Optional, Tuple

class EMA:
    """Exponential moving average."""
    def __init__(self, alpha: float):
        self.alpha = alpha
        self.value: Optional[float] = None
    def update(self, x: float) -> float:
        self.value = x if self.value is None else (self.alpha * x + (1 - self.alpha) * self.value)
        return self.value


class ScoreHistory:
    """Per (phase, agent) batch averages: EMA, recent window and best so far."""
    def __init__(self, ema_alpha: float = 0.1, window: int = 20):
        self.ema_alpha = ema_alpha
        self.window = window
        self._ema: Dict[Tuple[str, int], EMA] = {}
        self._recent: Dict[Tuple[str, int], Deque[float]] = {}
        self._best: Dict[Tuple[str, int], float] = {}

    def add(self, phase: str, agent: int, avg_score: float) -> float:
        """Record one batch average, return the updated EMA."""
        key = (phase, agent)
        ema = self._ema.setdefault(key, EMA(self.ema_alpha))
        self._recent.setdefault(key, deque(maxlen=self.window)).append(float(avg_score))
        self._best[key] = max(self._best.get(key, float("-inf")), float(avg_score))
        return ema.update(float(avg_score))

    def summary(self, phase: str, agent: int) -> Dict[str, float]:
        key = (phase, agent)
        buf = self._recent.get(key)
        if not buf:
            return {"ema": 0.0, "mean": 0.0, "best": 0.0}
        return {
            "ema": self._ema[key].value or 0.0,
            "mean": sum(buf) / len(buf),
            "best": self._best[key],
        }
