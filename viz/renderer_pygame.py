# viz/renderer_pygame.py
from __future__ import annotations
import os
from typing import Optional
import pygame as pg
from config import AppConfig
from core.interfaces import ItemType, SnakeView, Snapshot
import viz.renderer_colors as theme


class PygameRenderer:
    """Grid view of a Snapshot: walls, items, snakes and a one-line HUD.

    Either owns a window (`open`) or draws into a caller's surface
    (`attach_surface`), in which case flipping and timing are left to the caller.
    """
    def __init__(self):
        self.cell = 24
        self.cfg: Optional[AppConfig] = None
        self.surf: Optional[pg.Surface] = None
        self.clock: Optional[pg.time.Clock] = None
        self.font: Optional[pg.font.Font] = None
        self.quit_requested = False
        self._owns_window = False
        self._frame_idx = 0

    def open(self, cfg: AppConfig, size_x: int, size_y: int) -> None:
        if isinstance(cfg, type):
            raise TypeError("Pass an AppConfig instance (use AppConfig()), not the class.")
        pg.init()
        pg.display.set_caption(cfg.render_title)
        self._setup(cfg, pg.display.set_mode((size_x * cfg.render_cell, size_y * cfg.render_cell)))
        self.clock = pg.time.Clock()
        self._owns_window = True
        if cfg.render_record_dir:
            os.makedirs(cfg.render_record_dir, exist_ok=True)

    def attach_surface(self, surface: pg.Surface, cfg: AppConfig) -> None:
        """Draw into an existing surface; the owner flips and keeps time."""
        if not pg.get_init():
            pg.init()
        self._setup(cfg, surface)
        self.clock = None
        self._owns_window = False

    def _setup(self, cfg: AppConfig, surface: pg.Surface) -> None:
        self.cfg = cfg
        self.cell = cfg.render_cell
        self.surf = surface
        self.font = pg.font.SysFont(None, 22) if cfg.render_show_hud else None
        self.quit_requested = False
        self._frame_idx = 0

    # ---- drawing ----
    def draw(self, s: Snapshot) -> None:
        assert self.surf is not None, "Renderer not opened"
        assert self.cfg is not None, "Renderer config not set (call open first)"
        if self._owns_window:
            self._pump_events()

        self.surf.fill(theme.BG)
        self._draw_walls(s)
        self._draw_items(s)
        for snake in s.snakes:
            self._draw_snake(snake)
        if self.font is not None:
            self._draw_hud(s)

        if self._owns_window:
            pg.display.flip()
        if self.cfg.render_record_dir:
            self._save_frame()

    def _cell_rect(self, x: int, y: int) -> pg.Rect:
        return pg.Rect(x * self.cell, y * self.cell, self.cell, self.cell)

    def _draw_walls(self, s: Snapshot) -> None:
        xs, ys = s.walls.nonzero()
        for x, y in zip(xs, ys):
            pg.draw.rect(self.surf, theme.WALL, self._cell_rect(int(x), int(y)))

    def _draw_items(self, s: Snapshot) -> None:
        for item_type, (x, y) in s.items:
            rect = self._cell_rect(x, y)
            color = theme.ITEMS[item_type]
            if item_type == ItemType.BOX:
                pg.draw.rect(self.surf, color, rect.inflate(-self.cell // 4, -self.cell // 4))
            else:
                pg.draw.circle(self.surf, color, rect.center, self.cell // 3)

    def _draw_snake(self, snake: SnakeView) -> None:
        head_col, body_col = (theme.DEAD, theme.DEAD) if snake.dead else theme.snake_colors(snake.id)
        # tail first so the head stays on top where a body folds over it
        for i in range(len(snake.positions) - 1, -1, -1):
            x, y = snake.positions[i]
            pg.draw.rect(self.surf, head_col if i == 0 else body_col, self._cell_rect(x, y))
        if snake.dead or not snake.positions:
            return
        outline = None
        if snake.invincible_timer > 0:
            outline = theme.INVINCIBLE
        elif snake.sick_timer > 0:
            outline = theme.SICK
        if outline is not None:
            pg.draw.rect(self.surf, outline, self._cell_rect(*snake.positions[0]), 2)

    def _draw_hud(self, s: Snapshot) -> None:
        scores = "  ".join(f"#{i}:{sc}" for i, sc in enumerate(s.scores))
        status = "  (over)" if s.terminated else ""
        txt = self.font.render(f"Turn {s.turn}/{s.max_turns}   {scores}{status}", True, theme.TEXT)
        self.surf.blit(txt, (6, 4))

    # ---- window ----
    def _pump_events(self) -> None:
        for event in pg.event.get():
            if event.type == pg.QUIT:
                self.quit_requested = True
            elif event.type == pg.KEYDOWN and event.key == pg.K_ESCAPE:
                self.quit_requested = True

    def tick(self, fps: float) -> None:
        if self.clock:
            self.clock.tick(fps)

    def close(self) -> None:
        if self._owns_window:
            pg.quit()
        self.surf = None
        self.clock = None
        self.font = None
        self._owns_window = False

    def _save_frame(self) -> None:
        fname = os.path.join(self.cfg.render_record_dir, f"frame_{self._frame_idx:06d}.png")
        pg.image.save(self.surf, fname)
        self._frame_idx += 1
