# viz/renderer_colors.py
from core.interfaces import ItemType

BG = (18, 18, 24)
WALL = (90, 90, 110)
TEXT = (230, 230, 230)
DEAD = (70, 70, 70)
INVINCIBLE = (255, 215, 0)
SICK = (150, 200, 60)

# (head, body) per snake id, cycled
SNAKES = [
    ((60, 200, 90), (30, 140, 60)),
    ((80, 150, 255), (40, 90, 200)),
    ((240, 120, 60), (180, 80, 40)),
    ((210, 90, 210), (150, 50, 150)),
]

ITEMS = {
    ItemType.APPLE: (220, 40, 60),
    ItemType.BOX: (160, 110, 60),
    ItemType.INVINCIBILITY_BALL: (255, 215, 0),
    ItemType.SICK_BALL: (120, 200, 40),
}

def snake_colors(snake_id: int):
    return SNAKES[snake_id % len(SNAKES)]
