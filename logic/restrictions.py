"""logic/restrictions.py — Time-locked doors, restricted areas, safe waiting.

Both tables are plain content loaded from ``data/restrictions.toml``:

    [[door]]
    exit_id = "cafeteria_door"
    open_periods = ["breakfast", "lunch", "dinner"]

    [[area]]
    room_id = "guard_station_b"
    period = "all"
    level = "forbidden"
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field

from components import GridPos, PlayerState, Position, VisionCone, Vitals


RESTRICTION_LEVELS = ("allowed", "suspicious", "restricted", "forbidden")


@dataclass
class TimeLockedDoor:
    exit_id: str
    open_periods: list[str] = field(default_factory=list)


@dataclass
class AreaRestriction:
    room_id: str
    period: str = "all"
    level: str = "allowed"


DOORS: dict[str, TimeLockedDoor] = {}
AREAS: list[AreaRestriction] = []


def load_restrictions(raw: dict) -> tuple[int, int]:
    """Replace both tables from a parsed restrictions.toml.

    Unknown area levels read as ``allowed``.  Returns ``(doors, areas)``.
    """
    DOORS.clear()
    AREAS.clear()
    for d in raw.get("door", []):
        door = TimeLockedDoor(
            exit_id=d["exit_id"],
            open_periods=list(d.get("open_periods", [])),
        )
        DOORS[door.exit_id] = door
    for a in raw.get("area", []):
        level = a.get("level", "allowed")
        if level not in RESTRICTION_LEVELS:
            print(f"[CONTENT] Unknown restriction level {level!r} for {a.get('room_id')}")
            level = "allowed"
        AREAS.append(AreaRestriction(a["room_id"], a.get("period", "all"), level))
    return len(DOORS), len(AREAS)


def is_door_open(exit_id: str, period: str) -> bool:
    """Doors that are not time-locked are always open."""
    door = DOORS.get(exit_id)
    if door is None:
        return True
    return period in door.open_periods


def restriction_level(room_id: str, period: str) -> str:
    """A period-specific entry wins over an ``all`` entry; default ``allowed``."""
    fallback = "allowed"
    for area in AREAS:
        if area.room_id != room_id:
            continue
        if area.period == period:
            return area.level
        if area.period == "all" and fallback == "allowed":
            fallback = area.level
    return fallback


def can_wait_safely(world) -> bool:
    """False while any conscious actor in the player's room has them in range."""
    player = world.res(PlayerState)
    if player is None:
        return True
    for eid, pos, grid, cone in world.query_location(player.location, Position,
                                                      GridPos, VisionCone):
        if pos.location != player.location:
            continue
        vitals = world.get(eid, Vitals)
        if vitals is not None and not (vitals.conscious and vitals.alive):
            continue
        if cone.range <= 0:
            continue
        if math.hypot(player.col - grid.col, player.row - grid.row) <= cone.range:
            return False
    return True
