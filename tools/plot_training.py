# tools/plot_training.py
import csv
import sys
from collections import defaultdict
from pathlib import Path

# Use a non-interactive backend that writes to files
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

# --- Paths (resolve relative to repo root = parent of this script dir) ---
SCRIPT_DIR = Path(__file__).resolve().parent
REPO_ROOT = SCRIPT_DIR.parent
LOG_PATH = Path(sys.argv[1]) if len(sys.argv) > 1 else (REPO_ROOT / "runs" / "snake_ql" / "logs.csv")
OUT_DIR = LOG_PATH.parent / "plots"
OUT_DIR.mkdir(parents=True, exist_ok=True)

if not LOG_PATH.exists():
    raise FileNotFoundError(f"Could not find logs.csv at {LOG_PATH}. "
                            f"Run `python main.py train` first or pass the csv path.")

# (phase, agent) -> lists
cycles = defaultdict(list)
avg = defaultdict(list)
ema = defaultdict(list)
failed = defaultdict(list)
names = {}

rows = 0
with LOG_PATH.open(newline="") as f:
    for row in csv.DictReader(f):
        rows += 1
        key = (row["phase"], int(row["agent"]))
        cycles[key].append(int(row["cycle"]))
        avg[key].append(float(row["avg_score"]))
        ema[key].append(float(row["avg_score_ema"]))
        failed[key].append(int(row["episodes_failed"]))
        names[int(row["agent"])] = row.get("strategy", "")

if rows == 0:
    raise RuntimeError(f"{LOG_PATH} has a header but no rows. Run at least one cycle first.")

agents = sorted({a for _, a in cycles})

def savefig_named(fig, name):
    path = OUT_DIR / name
    fig.savefig(path, dpi=200, bbox_inches="tight")
    print(f"saved: {path}")

# --- One plot per agent: test vs train average score ---
for a in agents:
    fig = plt.figure(figsize=(10, 6))
    for phase in ("test", "train"):
        key = (phase, a)
        if key not in cycles:
            continue
        plt.plot(cycles[key], avg[key], linewidth=1, alpha=0.4, label=f"{phase} raw")
        plt.plot(cycles[key], ema[key], linewidth=2, label=f"{phase} EMA")
    plt.title(f"Agent {a} ({names.get(a, '')}) average score per batch")
    plt.xlabel("cycle"); plt.ylabel("average score"); plt.legend()
    savefig_named(fig, f"agent{a}_scores.png"); plt.close(fig)

# --- All agents, test phase only ---
fig = plt.figure(figsize=(10, 6))
for a in agents:
    key = ("test", a)
    if key in cycles:
        plt.plot(cycles[key], ema[key], linewidth=2, label=f"agent {a}")
plt.title("Test score (EMA)"); plt.xlabel("cycle"); plt.ylabel("average score"); plt.legend()
savefig_named(fig, "test_scores.png"); plt.close(fig)

# --- Failed episodes, if any ---
if any(sum(v) for v in failed.values()):
    fig = plt.figure(figsize=(10, 4))
    for key, vals in sorted(failed.items()):
        plt.plot(cycles[key], vals, label=f"{key[0]} agent {key[1]}")
    plt.title("Failed episodes per batch"); plt.xlabel("cycle"); plt.ylabel("episodes"); plt.legend()
    savefig_named(fig, "failed_episodes.png"); plt.close(fig)

print(f"\nAll plots saved under: {OUT_DIR.resolve()}")
