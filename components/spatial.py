"""components.spatial — Continuous position, grid cell, and facing.

All coordinates are in tiles.  ``Position`` is the continuous
top-left corner of the actor's one-tile footprint (what the renderer
interpolates); ``GridPos`` is the discrete cell the actor occupies,
derived from the footprint's centre.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Position:
    x: float = 0.0        # tiles
    y: float = 0.0        # tiles
    location: str = ""    # room id


@dataclass
class GridPos:
    col: int = 0
    row: int = 0


@dataclass
class Facing:
    """Which direction an actor faces.

    Values: 'right', 'left', 'up', 'down'
    Drives the vision cone and the sprite.
    """
    direction: str = "down"


DIRECTIONS = ("up", "down", "left", "right")

# Grid step for each facing: (dcol, drow)
DIRECTION_STEPS: dict[str, tuple[int, int]] = {
    "up":    (0, -1),
    "down":  (0, 1),
    "left":  (-1, 0),
    "right": (1, 0),
}
