# viz/renderer_headless.py
from __future__ import annotations
from typing import List
from config import AppConfig
from core.interfaces import Snapshot

class HeadlessRenderer:
    """Keeps the frames instead of drawing them."""
    def __init__(self):
        self.frames: List[Snapshot] = []
        self.quit_requested = False
        self.opened = False
    def open(self, cfg: AppConfig, size_x: int, size_y: int) -> None:
        self.opened = True
    def draw(self, snap: Snapshot) -> None:
        self.frames.append(snap)
    def tick(self, fps: float) -> None:
        pass
    def close(self) -> None:
        self.opened = False
