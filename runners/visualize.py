# runners/visualize.py
from __future__ import annotations
from typing import Optional, Sequence, Tuple

from config import AppConfig
from core.interfaces import Layout
from rl.strategy import Strategy
from viz.render_iface import Renderer
from .episode import EpisodeRunner


def visualize(
    cfg: AppConfig,
    layout: Layout,
    strategies: Sequence[Strategy],
    train: bool = False,
    renderer: Optional[Renderer] = None,
) -> Tuple[int, ...]:
    """Play one episode at cfg.fps turns per second and draw every turn.

    Closing the window stops the drawing, not the episode: the remaining
    turns are played without delay.
    """
    if renderer is None:
        from viz.renderer_pygame import PygameRenderer
        renderer = PygameRenderer()

    for s in strategies:
        s.set_train_mode(train)
    runner = EpisodeRunner(layout, strategies, cfg, train=train, seed=cfg.seed)

    renderer.open(cfg, layout.size_x, layout.size_y)
    try:
        renderer.draw(runner.snapshot())
        while not runner.terminated:
            runner.advance()
            if renderer.quit_requested:
                continue
            renderer.draw(runner.snapshot())
            renderer.tick(cfg.fps)
    finally:
        renderer.close()

    print(f"[viz] turns={runner.turn} scores={list(runner.scores)}")
    return runner.scores
