"""logic/ai/perception.py — Vision cones, line of sight, and detection.

Pure functions over grid coordinates (col, row).  Nothing here
mutates the world; the tick orchestrator feeds the results into the
behaviour system.

    level = detection_level((5, 2), "down", cone, (5, 5), sneaking=True, room=room)
    if should_react(ActorKind.GUARD, level):
        ...
"""

from __future__ import annotations
import math

from components import Facing, GridPos, PlayerState, Position
from components.ai import ActorKind, VisionCone
from core.constants import REACT_THRESHOLD, SNEAK_MULTIPLIER
from core.room import Room, get_room
from core.tuning import get as _tun


# ── Vision cone ──────────────────────────────────────────────────────

_FACING_DEGREES: dict[str, float] = {
    "right": 0.0,
    "down":  90.0,
    "left":  180.0,
    "up":    270.0,
}


def facing_to_angle(direction: str) -> float:
    """Convert a cardinal Facing.direction string to degrees.

    right → 0, down → 90, left → 180, up → 270 (y grows downward).
    """
    return _FACING_DEGREES.get(direction, 0.0)


def angle_difference(a: float, b: float) -> float:
    """Smallest absolute difference between two bearings, in degrees."""
    diff = abs(a - b) % 360.0
    return 360.0 - diff if diff > 180.0 else diff


def in_vision_cone(origin: tuple[int, int], facing_dir: str,
                   target: tuple[int, int], cone: VisionCone) -> bool:
    """Return True if *target* lies inside the cone cast from *origin*.

    A blind watcher (range 0) sees nothing; a target on the watcher's
    own cell is always seen.
    """
    if cone.range <= 0:
        return False
    dx = target[0] - origin[0]
    dy = target[1] - origin[1]
    dist = math.hypot(dx, dy)
    if dist > cone.range:
        return False
    if dist == 0:
        return True
    bearing = math.degrees(math.atan2(dy, dx))
    return angle_difference(bearing, facing_to_angle(facing_dir)) <= cone.angle / 2.0


# ── Line of sight ────────────────────────────────────────────────────

def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def has_line_of_sight(origin: tuple[int, int], target: tuple[int, int],
                      room: Room) -> bool:
    """Sample the straight line from *origin* to *target* cell by cell.

    Uses max(|dx|, |dy|) steps; any sampled cell that is out of bounds
    or a wall blocks sight.  Both endpoints are sampled.
    """
    dx = target[0] - origin[0]
    dy = target[1] - origin[1]
    steps = max(abs(dx), abs(dy))
    for i in range(steps + 1):
        t = i / steps if steps else 0.0
        col = _round_half_up(origin[0] + dx * t)
        row = _round_half_up(origin[1] + dy * t)
        if room.is_wall(col, row):
            return False
    return True


# ── Detection ────────────────────────────────────────────────────────

def detection_level(origin: tuple[int, int], facing_dir: str, cone: VisionCone,
                    target: tuple[int, int], sneaking: bool,
                    room: Room | None) -> float:
    """How clearly the watcher sees the player, 0–1.

    Full visibility falls off linearly to zero at the edge of the
    cone's range; sneaking scales it by ``perception.sneak_multiplier``.
    Without room geometry nothing can be confirmed, so the level is 0.
    """
    if room is None:
        return 0.0
    if not in_vision_cone(origin, facing_dir, target, cone):
        return 0.0
    if not has_line_of_sight(origin, target, room):
        return 0.0

    level = 1.0
    if sneaking:
        level *= _tun("perception", "sneak_multiplier", SNEAK_MULTIPLIER)
    dist = math.hypot(target[0] - origin[0], target[1] - origin[1])
    level *= max(0.0, 1.0 - dist / cone.range)
    return max(0.0, min(1.0, level))


def should_react(kind: ActorKind, level: float) -> bool:
    """Guards react once detection passes the threshold; nobody else does."""
    if kind is ActorKind.GUARD:
        return level > _tun("perception", "react_threshold", REACT_THRESHOLD)
    if kind in (ActorKind.INMATE, ActorKind.STAFF):
        return False
    raise ValueError(f"unhandled actor kind {kind!r}")


def can_see_player(world, eid: int) -> bool:
    """True if actor *eid* currently has the player in cone and line of sight."""
    player = world.res(PlayerState)
    pos = world.get(eid, Position)
    grid = world.get(eid, GridPos)
    cone = world.get(eid, VisionCone)
    if player is None or pos is None or grid is None or cone is None:
        return False
    if pos.location != player.location:
        return False
    room = get_room(pos.location)
    if room is None:
        return False
    facing = world.get(eid, Facing)
    origin = (grid.col, grid.row)
    target = (player.col, player.row)
    return (in_vision_cone(origin, facing.direction if facing else "down", target, cone)
            and has_line_of_sight(origin, target, room))
