# rl/logging.py
from __future__ import annotations
import csv, os
from typing import Dict, Any, Protocol, Callable, Sequence, TYPE_CHECKING

from runners.batch import phase_name
from .metrics import ScoreHistory

if TYPE_CHECKING:
    from runners.batch import BatchResult
    from rl.strategy import Strategy

BATCH_KEYS = [
    "step",
    "cycle", "phase", "agent", "strategy",
    "avg_score", "avg_score_ema",
    "episodes_ok", "episodes_failed", "turns", "updates", "elapsed_s",
]

class BatchLogger(Protocol):
    def log(self, step: int, row: Dict[str, Any]) -> None: ...
    def flush(self) -> None: ...
    def close(self) -> None: ...


class CSVLogger:
    """Rows appended to one CSV file under a fixed column list.

    The header is written only when the file is new or empty, so a run
    can be resumed into the same log. Keys outside the columns are dropped.
    """
    def __init__(self, path: str, fieldnames: Sequence[str] = tuple(BATCH_KEYS)):
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        self.path = path
        self.fieldnames = list(fieldnames)
        fresh = not os.path.exists(path) or os.path.getsize(path) == 0
        self._fh = open(path, "a", newline="")
        self._out = csv.DictWriter(self._fh, fieldnames=self.fieldnames, extrasaction="ignore")
        if fresh:
            self._out.writeheader()

    def log(self, step: int, row: Dict[str, Any]) -> None:
        self._out.writerow(dict(row, step=step))

    def flush(self) -> None:
        self._fh.flush()

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()

    def __enter__(self) -> "CSVLogger":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def make_batch_logger(
    logger: BatchLogger,
    history: ScoreHistory,
) -> Callable[[int, "BatchResult", Sequence["Strategy"]], None]:
    """
    Returns a function(cycle, result, strategies) -> None that writes one row
    per agent slot and feeds the averages into `history`.
    'step' counts logged batches.
    """
    counter = {"step": 0}

    def _on_batch_end(cycle: int, result: "BatchResult", strategies: Sequence["Strategy"]) -> None:
        phase = phase_name(result.train)
        for j, s in enumerate(strategies):
            avg = float(result.avg_scores[j])
            logger.log(counter["step"], {
                "cycle": cycle,
                "phase": phase,
                "agent": j,
                "strategy": type(s).__name__,
                "avg_score": avg,
                "avg_score_ema": history.add(phase, j, avg),
                "episodes_ok": result.completed,
                "episodes_failed": result.failed,
                "turns": result.total_turns,
                "updates": s.n_updates,
                "elapsed_s": round(result.elapsed_s, 4),
            })
        counter["step"] += 1
        logger.flush()

    return _on_batch_end
