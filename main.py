# main.py
import argparse
import os

from config import AppConfig
from core.layouts import BUILTIN, get_layout
from rl.factory import STRATEGIES, make_strategies
from rl.logging import BATCH_KEYS, CSVLogger, make_batch_logger
from rl.metrics import ScoreHistory
from rl.trainer import BatchTrainer, TrainHooks
from runners.batch import launch_parallel_games, report
from runners.visualize import visualize


def build_config(args) -> AppConfig:
    cfg = AppConfig().with_(
        layout=args.layout,
        strategy=args.strategy,
        gamma=args.gamma,
        epsilon=args.epsilon,
        alpha=args.alpha,
        max_turns=args.max_turns,
        n_train=args.n_train,
        n_test=args.n_test,
        cycles=args.cycles,
        seed=args.seed,
        random_first_apple=not args.fixed_first_apple,
        viz_every=args.viz_every or None,
        fps=args.fps,
        log_dir=args.log_dir,
    )
    return cfg.validate()


def run_train(cfg: AppConfig) -> None:
    layout = get_layout(cfg.layout)
    strategies = make_strategies(cfg, len(layout.snakes))

    print("=== Snake Q-learning ===")
    print(f"layout: {cfg.layout} ({layout.size_x}x{layout.size_y}, {len(layout.snakes)} snakes)")
    print(f"strategy: {cfg.strategy}  gamma: {cfg.gamma}  epsilon: {cfg.epsilon}  alpha: {cfg.alpha}")
    print(f"batches: test={cfg.n_test} train={cfg.n_train}  max turns: {cfg.max_turns}")
    log_path = os.path.join(cfg.log_dir, "logs.csv")
    print(f"logs: {log_path}")

    logger = CSVLogger(log_path, fieldnames=BATCH_KEYS)
    history = ScoreHistory(ema_alpha=cfg.ema_alpha)
    hooks = TrainHooks(
        on_batch_end=make_batch_logger(logger, history),
        on_visualize=(lambda cycle: visualize(cfg, layout, strategies)) if cfg.viz_every else None,
    )
    trainer = BatchTrainer(cfg, layout, strategies, hooks)
    try:
        trainer.train()
    except KeyboardInterrupt:
        print("\n[train] interrupted")
    finally:
        logger.close()

    for j in range(len(strategies)):
        s = history.summary("test", j)
        print(f"[summary] agent {j}: test ema={s['ema']:.3f} "
              f"recent mean={s['mean']:.3f} best={s['best']:.3f}")


def run_batch(cfg: AppConfig, train: bool) -> None:
    layout = get_layout(cfg.layout)
    strategies = make_strategies(cfg, len(layout.snakes))
    result = launch_parallel_games(cfg.n_train if train else cfg.n_test, layout,
                                   strategies, cfg, train=train, seed=cfg.seed)
    report(result, strategies)


def run_visualize(cfg: AppConfig) -> None:
    layout = get_layout(cfg.layout)
    strategies = make_strategies(cfg, len(layout.snakes))
    visualize(cfg, layout, strategies)


def parse_args(argv=None):
    d = AppConfig()
    p = argparse.ArgumentParser(description="Toroidal Snake with batch Q-learning")
    p.add_argument("mode", choices=["train", "batch", "visualize"])
    p.add_argument("--layout", default=d.layout, choices=sorted(BUILTIN))
    p.add_argument("--strategy", default=d.strategy, choices=sorted(STRATEGIES))
    p.add_argument("--gamma", type=float, default=d.gamma)
    p.add_argument("--epsilon", type=float, default=d.epsilon)
    p.add_argument("--alpha", type=float, default=d.alpha)
    p.add_argument("--max-turns", type=int, default=d.max_turns)
    p.add_argument("--n-train", type=int, default=d.n_train)
    p.add_argument("--n-test", type=int, default=d.n_test)
    p.add_argument("--cycles", type=int, default=d.cycles)
    p.add_argument("--seed", type=int, default=d.seed)
    p.add_argument("--fixed-first-apple", action="store_true",
                   help="keep the layout's first item where it is")
    p.add_argument("--viz-every", type=int, default=d.viz_every,
                   help="cycles between rendered episodes, 0 disables")
    p.add_argument("--fps", type=float, default=d.fps)
    p.add_argument("--log-dir", default=d.log_dir)
    p.add_argument("--train", action="store_true", help="batch mode: run a train batch")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    cfg = build_config(args)
    if args.mode == "train":
        run_train(cfg)
    elif args.mode == "batch":
        run_batch(cfg, train=args.train)
    elif args.mode == "visualize":
        run_visualize(cfg)

if __name__ == "__main__":
    main()
