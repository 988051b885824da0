# tests/conftest.py
import os
import sys

# Headless SDL so tests don't open a window
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

# Ensure project root is importable (so core.* / rl.* imports work when running from repo root)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import numpy as np
import pygame as pg
import pytest

from config import AppConfig

@pytest.fixture(scope="session", autouse=True)
def _pygame_session():
    pg.init()
    yield
    pg.quit()

@pytest.fixture
def screen():
    # Plain Surface is fine for draw/blit tests (no need for display mode)
    return pg.Surface((320, 320), pg.SRCALPHA)

@pytest.fixture
def cfg():
    return AppConfig(random_first_apple=False, respawn_apples=False, seed=0, max_turns=50)

@pytest.fixture
def state_factory():
    """Build a GameState directly from snake bodies (head first)."""
    from core.interfaces import Action, Item, Snake
    from core.snake_rules import GameState

    def make(size=(8, 6), bodies=(((2, 2),),), items=(), walls=(), max_turns=50,
             last_actions=None, seed=0):
        sx, sy = size
        mask = np.zeros((sx, sy), dtype=bool)
        for x, y in walls:
            mask[x, y] = True
        mask.setflags(write=False)
        snakes = []
        for i, body in enumerate(bodies):
            last = last_actions[i] if last_actions else Action.MOVE_RIGHT
            snakes.append(Snake(positions=list(body), id=i, last_action=last))
        return GameState(sx, sy, mask, snakes, [Item(t, p) for t, p in items], max_turns, seed)
    return make
