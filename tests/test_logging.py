# tests/test_logging.py
import csv

import pytest

from rl.logging import BATCH_KEYS, CSVLogger, make_batch_logger
from rl.metrics import EMA, ScoreHistory
from rl.strategy import FixedActionStrategy
from runners.batch import BatchResult


def make_result(train, avgs):
    return BatchResult(train=train, requested=4, completed=3, failed=1,
                       avg_scores=tuple(avgs), episode_scores=(), total_turns=30,
                       elapsed_s=0.123456)

def test_ema():
    e = EMA(0.5)
    assert e.update(4.0) == 4.0
    assert e.update(0.0) == 2.0

def test_score_history_summary():
    h = ScoreHistory(ema_alpha=0.5, window=2)
    assert h.summary("test", 0) == {"ema": 0.0, "mean": 0.0, "best": 0.0}
    for v in (1.0, 5.0, 3.0):
        h.add("test", 0, v)
    s = h.summary("test", 0)
    assert s["mean"] == pytest.approx(4.0)
    assert s["best"] == 5.0
    assert s["ema"] == pytest.approx(3.0)
    assert h.summary("train", 0)["best"] == 0.0

def test_csv_logger_writes_header_once(tmp_path):
    path = tmp_path / "sub" / "log.csv"
    lg = CSVLogger(str(path), fieldnames=["step", "a"])
    lg.log(0, {"a": 1, "ignored": 2})
    lg.close()
    lg = CSVLogger(str(path), fieldnames=["step", "a"])
    lg.log(1, {"a": 3})
    lg.close()
    rows = list(csv.DictReader(path.open()))
    assert rows == [{"step": "0", "a": "1"}, {"step": "1", "a": "3"}]

def test_batch_logger_rows(tmp_path):
    path = tmp_path / "logs.csv"
    logger = CSVLogger(str(path), fieldnames=BATCH_KEYS)
    history = ScoreHistory(ema_alpha=0.5)
    on_batch_end = make_batch_logger(logger, history)
    strategies = [FixedActionStrategy(), FixedActionStrategy()]

    on_batch_end(0, make_result(False, [2.0, 0.0]), strategies)
    on_batch_end(0, make_result(True, [4.0, 1.0]), strategies)
    on_batch_end(1, make_result(False, [0.0, 0.0]), strategies)
    logger.close()

    rows = list(csv.DictReader(path.open()))
    assert len(rows) == 6
    assert list(rows[0]) == BATCH_KEYS
    assert [r["step"] for r in rows] == ["0", "0", "1", "1", "2", "2"]
    assert rows[0]["phase"] == "test" and rows[2]["phase"] == "train"
    assert rows[0]["strategy"] == "FixedActionStrategy"
    assert rows[0]["episodes_failed"] == "1"
    # test EMA for agent 0: 2.0 then 0.5 * 0 + 0.5 * 2.0
    assert float(rows[4]["avg_score_ema"]) == pytest.approx(1.0)
    assert history.summary("train", 0)["best"] == 4.0
