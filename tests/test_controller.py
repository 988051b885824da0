# tests/test_controller.py
import pytest

from core.interfaces import Action
from core.layouts import get_layout
from rl.strategy import FixedActionStrategy
from runners.controller import EpisodeController
from runners.episode import EpisodeRunner


@pytest.fixture
def runner(cfg):
    layout = get_layout("small_no_wall_alone")
    return EpisodeRunner(layout, [FixedActionStrategy(Action.MOVE_RIGHT)], cfg.with_(max_turns=20))

def test_single_step(runner):
    ticks = []
    ctl = EpisodeController(runner, on_tick=ticks.append)
    assert ctl.step() == (1, False)
    assert ctl.step() == (2, False)
    assert ctl.turn == 2
    assert [s.turn for s in ticks] == [1, 2]
    assert not ctl.is_playing

def test_play_runs_to_the_end(runner):
    ctl = EpisodeController(runner, turns_per_sec=1000)
    try:
        ctl.play()
        assert ctl.wait(timeout=5.0)
        assert ctl.turn == 20
        assert ctl.snapshot().terminated
        assert not ctl.is_playing
    finally:
        ctl.close()

def test_pause_holds_the_turn(runner):
    ctl = EpisodeController(runner, turns_per_sec=1000)
    try:
        ctl.pause()
        assert not ctl.wait(timeout=0.05)
        assert ctl.turn == 0
    finally:
        ctl.close()

def test_restart_rebuilds_episode(runner):
    snaps = []
    ctl = EpisodeController(runner, on_tick=snaps.append)
    for _ in range(5):
        ctl.step()
    ctl.restart()
    assert ctl.turn == 0
    assert snaps[-1].turn == 0
    assert snaps[-1].snakes[0].positions == ((2, 2),)

def test_speed_must_be_positive(runner):
    ctl = EpisodeController(runner)
    with pytest.raises(ValueError):
        ctl.set_speed(0)
    with pytest.raises(ValueError):
        EpisodeController(runner, turns_per_sec=-1)
