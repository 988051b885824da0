# runners/controller.py
from __future__ import annotations
from typing import Callable, Optional, Tuple
import threading, time

from core.interfaces import Snapshot
from .episode import EpisodeRunner


class EpisodeController:
    """Play / pause / single-step one episode on a background thread.

    What a UI needs to drive a game: the runner advances at `turns_per_sec`
    while playing, and every new state is handed to `on_tick`.
    """
    def __init__(self, runner: EpisodeRunner, turns_per_sec: float = 10.0,
                 on_tick: Optional[Callable[[Snapshot], None]] = None):
        self._runner = runner
        self._on_tick = on_tick
        self._delay = 0.0
        self.set_speed(turns_per_sec)
        self._playing = threading.Event()
        self._stop = threading.Event()
        self._done = threading.Event()
        self._advance_lock = threading.Lock()
        self._t: Optional[threading.Thread] = None

    # ---- commands ----
    def play(self) -> None:
        if self._t is None:
            self._t = threading.Thread(target=self._run, name="EpisodeController", daemon=True)
            self._t.start()
        self._playing.set()

    def pause(self) -> None:
        self._playing.clear()

    def step(self) -> Tuple[int, bool]:
        with self._advance_lock:
            turn, done = self._runner.advance()
        self._after_advance(done)
        return turn, done

    def restart(self) -> None:
        self.pause()
        with self._advance_lock:
            self._runner.init()
            self._done.clear()
        if self._on_tick is not None:
            self._on_tick(self._runner.snapshot())

    def set_speed(self, turns_per_sec: float) -> None:
        if turns_per_sec <= 0:
            raise ValueError(f"turns_per_sec must be positive, got {turns_per_sec}")
        self._delay = 1.0 / turns_per_sec

    # ---- queries ----
    @property
    def turn(self) -> int:
        return self._runner.turn

    @property
    def is_playing(self) -> bool:
        return self._playing.is_set()

    def snapshot(self) -> Snapshot:
        with self._advance_lock:
            return self._runner.snapshot()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the episode ends. False on timeout."""
        return self._done.wait(timeout)

    def close(self) -> None:
        self._stop.set()
        self._playing.set()  # wake the loop so it can exit
        if self._t is not None:
            self._t.join(timeout=3.0)
            self._t = None

    # ---- internals ----
    def _after_advance(self, done: bool) -> None:
        if self._on_tick is not None:
            self._on_tick(self._runner.snapshot())
        if done:
            self._playing.clear()
            self._done.set()

    def _run(self) -> None:
        while not self._stop.is_set():
            if not self._playing.wait(timeout=0.1):
                continue
            if self._stop.is_set():
                break
            t0 = time.perf_counter()
            with self._advance_lock:
                _, done = self._runner.advance()
            self._after_advance(done)
            dt = time.perf_counter() - t0
            if not done and self._delay > dt:
                time.sleep(self._delay - dt)
