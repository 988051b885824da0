# core/layouts.py
from __future__ import annotations
from typing import Dict, Sequence, Tuple
import numpy as np
from .interfaces import Action, ItemType, Layout, SnakeStart

# '%' wall  '.' empty  'S' snake  'A' apple  'B' box  'I' invincibility  'X' sick
ITEM_CHARS = {
    "A": ItemType.APPLE,
    "B": ItemType.BOX,
    "I": ItemType.INVINCIBILITY_BALL,
    "X": ItemType.SICK_BALL,
}

def layout_from_rows(rows: Sequence[str], start_action: Action = Action.MOVE_RIGHT) -> Layout:
    """Build a Layout from equal-length text rows (row index = y)."""
    if not rows:
        raise ValueError("empty layout")
    size_y = len(rows)
    size_x = len(rows[0])
    if any(len(r) != size_x for r in rows):
        raise ValueError("layout rows must all have the same length")

    walls = np.zeros((size_x, size_y), dtype=bool)
    snakes = []
    items = []
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            if ch == "%":
                walls[x, y] = True
            elif ch == "S":
                snakes.append(SnakeStart((x, y), start_action))
            elif ch in ITEM_CHARS:
                items.append((ITEM_CHARS[ch], (x, y)))
            elif ch not in ". ":
                raise ValueError(f"unknown layout char {ch!r} at ({x}, {y})")

    layout = Layout(size_x, size_y, walls, tuple(snakes), tuple(items))
    layout.validate()
    return layout


BUILTIN: Dict[str, Tuple[str, ...]] = {
    "small_no_wall_alone": (
        "........",
        "........",
        "..S...A.",
        "........",
        "........",
    ),
    "small_arena_alone": (
        "%%%%%%%%%%",
        "%........%",
        "%.S......%",
        "%........%",
        "%.....A..%",
        "%........%",
        "%%%%%%%%%%",
    ),
    "small_arena_duel": (
        "%%%%%%%%%%%%",
        "%..........%",
        "%.S......I.%",
        "%....%%....%",
        "%.A..%%..B.%",
        "%..X.....S.%",
        "%..........%",
        "%%%%%%%%%%%%",
    ),
}

def get_layout(name: str) -> Layout:
    try:
        rows = BUILTIN[name]
    except KeyError:
        raise ValueError(f"unknown layout {name!r}; choose from {sorted(BUILTIN)}") from None
    return layout_from_rows(rows)
