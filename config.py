# config.py
from dataclasses import dataclass, replace
from typing import Optional, Literal

@dataclass(frozen=True, slots=True)
class AppConfig:
    # shared / global
    layout: str = "small_no_wall_alone"
    seed: Optional[int] = None

    # Q-learning
    strategy: Literal["tabular", "linear"] = "tabular"
    gamma: float = 0.95
    epsilon: float = 0.3                 # base epsilon, used in train mode only
    alpha: float = 0.01
    n_actions: int = 4

    # episodes / batches
    max_turns: int = 300
    n_train: int = 100                   # episodes per train batch
    n_test: int = 100                    # episodes per test batch
    cycles: int = 10_000_000             # test/train alternations
    random_first_apple: bool = True

    # game rules
    apple_score: int = 1
    box_score: int = 2
    invincible_turns: int = 20
    sick_turns: int = 20
    respawn_apples: bool = True
    bonus_item_prob: float = 0.0

    # visualize
    viz_every: Optional[int] = 100       # cycles between rendered episodes, None = never
    fps: float = 10.0
    render_cell: int = 32
    render_title: str = "Snake"
    render_show_hud: bool = True
    render_record_dir: Optional[str] = None

    # logging
    log_dir: str = "runs/snake_ql"
    ema_alpha: float = 0.1


    def with_(self, **kwargs) -> "AppConfig":
        """Convenience: clone with updated values"""
        return replace(self, **kwargs)

    def validate(self) -> "AppConfig":
        for name in ("gamma", "epsilon", "alpha", "bonus_item_prob"):
            v = getattr(self, name)
            if not 0.0 <= v <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {v}")
        if not 1 <= self.n_actions <= 4:
            raise ValueError(f"n_actions must be in 1..4, got {self.n_actions}")
        for name in ("max_turns", "n_train", "n_test"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.strategy not in ("tabular", "linear"):
            raise ValueError(f"unknown strategy {self.strategy!r}")
        return self
