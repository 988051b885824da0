# viz/render_iface.py
from __future__ import annotations
from typing import Protocol
from config import AppConfig
from core.interfaces import Snapshot

class Renderer(Protocol):
    quit_requested: bool
    def open(self, cfg: AppConfig, size_x: int, size_y: int) -> None: ...
    def draw(self, snap: Snapshot) -> None: ...
    def tick(self, fps: float) -> None: ...
    def close(self) -> None: ...
