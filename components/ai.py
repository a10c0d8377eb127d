"""components.ai — Patrol route, schedule, behaviour mode, and vision."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class BehaviorMode(Enum):
    """Closed set of actor behaviours.

    ``ALERT`` and ``CHASE`` exist for the guard escalation ladder; no
    system drives an actor into them yet, but every decision point
    handles them.
    """
    IDLE = "idle"
    PATROL = "patrol"
    ALERT = "alert"
    CHASE = "chase"
    CONVERSATION = "conversation"


class ActorKind(Enum):
    GUARD = "guard"
    INMATE = "inmate"
    STAFF = "staff"


@dataclass
class Waypoint:
    """One stop of a patrol route.

    ``wait``: seconds spent at rest here before heading to the next stop.
    ``facing``: direction to turn to on arrival ('' keeps the walking facing).
    """
    location: str = ""
    col: int = 0
    row: int = 0
    wait: float = 0.0       # s
    facing: str = ""


@dataclass
class Patrol:
    """Cyclic waypoint route plus the movement state that walks it.

    ``route`` is a fixed sequence; ``index`` always points into it and
    wraps modulo its length.  While ``moving`` the actor interpolates
    toward ``target`` (col, row); at rest it accumulates ``wait_timer``
    toward ``route[index].wait``.
    """
    route: list[Waypoint] = field(default_factory=list)
    index: int = 0
    speed: float = 2.0                       # tiles/s
    moving: bool = False
    target: tuple[int, int] | None = None    # (col, row)
    wait_timer: float = 0.0                  # s


@dataclass
class Directive:
    """What an actor should be doing during one schedule period."""
    behavior: BehaviorMode = BehaviorMode.IDLE
    location: str = ""      # '' = stay where you are


@dataclass
class Schedule:
    """Per-period directive table.

    ``pending_location`` holds a relocation that was deferred because
    the player could see the actor; it is retried every tick.
    """
    directives: dict[str, Directive] = field(default_factory=dict)
    pending_location: str = ""


@dataclass
class Behavior:
    """Current behaviour mode and suspicion.

    ``alertness``: 0–100, rises while the player is detected and decays
    otherwise.
    ``resume_mode``: the mode to fall back to when a conversation ends.
    ``cooldown``: seconds before a guard may confront the player again.
    """
    mode: BehaviorMode = BehaviorMode.IDLE
    alertness: float = 0.0
    resume_mode: BehaviorMode = BehaviorMode.IDLE
    cooldown: float = 0.0


@dataclass
class VisionCone:
    """Directional sight.

    ``range``: how far the actor sees (tiles).  0 = blind.
    ``angle``: full cone width (°), centred on the facing direction.
    """
    range: float = 5.0
    angle: float = 90.0
