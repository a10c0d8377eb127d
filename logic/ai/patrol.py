"""logic/ai/patrol.py — Waypoint patrol state machine.

Two states per actor:

  Waiting  (``moving`` False): at ``route[index]``, accumulating
           ``wait_timer`` toward that waypoint's ``wait``; once it is
           reached, pick ``(index + 1) % len(route)`` and start moving.
  Moving   (``moving`` True):  interpolate ``Position`` toward
           ``target`` at ``speed`` tiles/s; snap on arrival.

``update_patrol`` does not mutate anything.  It returns a patch,
``{component type: {field: value}}``, that the tick stages into the
PatchBatch, so every actor reads the same start-of-tick snapshot.
"""

from __future__ import annotations
import math

from components import Facing, GridPos, Patrol, Position


def direction_to(from_xy: tuple[float, float], to_xy: tuple[float, float],
                 current: str = "down") -> str:
    """Cardinal facing from one point toward another.

    Horizontal wins only when |dx| > |dy|; ties go vertical.  A zero
    vector keeps *current*.
    """
    dx = to_xy[0] - from_xy[0]
    dy = to_xy[1] - from_xy[1]
    if dx == 0 and dy == 0:
        return current
    if abs(dx) > abs(dy):
        return "right" if dx > 0 else "left"
    return "down" if dy > 0 else "up"


def grid_from_position(x: float, y: float) -> tuple[int, int]:
    """Cell under the centre of a one-tile footprint whose corner is (x, y)."""
    return int(math.floor(x + 0.5)), int(math.floor(y + 0.5))


def update_patrol(patrol: Patrol, pos: Position, facing: Facing,
                  dt: float) -> dict[type, dict]:
    """Advance one patrol tick of *dt* seconds and return the changes.

    Degenerate routes (empty) and non-positive speeds produce an empty
    patch.
    """
    route = patrol.route
    if not route or patrol.speed <= 0:
        return {}

    if not patrol.moving or patrol.target is None:
        waypoint = route[patrol.index % len(route)]
        if patrol.wait_timer < waypoint.wait:
            return {Patrol: {"wait_timer": patrol.wait_timer + dt}}

        next_index = (patrol.index + 1) % len(route)
        nxt = route[next_index]
        return {
            Patrol: {
                "index": next_index,
                "moving": True,
                "target": (nxt.col, nxt.row),
                "wait_timer": 0.0,
            },
            Facing: {"direction": direction_to((pos.x, pos.y), (nxt.col, nxt.row),
                                               facing.direction)},
        }

    tx, ty = patrol.target
    dx = tx - pos.x
    dy = ty - pos.y
    remaining = math.hypot(dx, dy)
    step = patrol.speed * dt

    if remaining <= step:
        waypoint = route[patrol.index % len(route)]
        return {
            Position: {"x": float(tx), "y": float(ty)},
            GridPos: {"col": tx, "row": ty},
            Patrol: {"moving": False, "target": None},
            Facing: {"direction": waypoint.facing or facing.direction},
        }

    ratio = step / remaining
    nx = pos.x + dx * ratio
    ny = pos.y + dy * ratio
    col, row = grid_from_position(nx, ny)
    return {
        Position: {"x": nx, "y": ny},
        GridPos: {"col": col, "row": row},
    }
