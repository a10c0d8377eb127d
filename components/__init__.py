"""components — ECS component dataclasses, organised by domain.

Submodules
----------
spatial        Position, GridPos, Facing
ai             Patrol, Waypoint, Schedule, Directive, Behavior,
               BehaviorMode, ActorKind, VisionCone
social         Identity, Dialogue, Relationship, Vitals
resources      GameTime, GameClock, UIMode, UIState, Transition,
               TextDisplay, PlayerState, PlayerKnowledge, ActorIndex
dev_log        DevLog

All public names are re-exported here so code can do
``from components import Position``.
"""

# ── Spatial ──────────────────────────────────────────────────────────
from components.spatial import Position, GridPos, Facing

# ── AI ───────────────────────────────────────────────────────────────
from components.ai import (
    Patrol, Waypoint, Schedule, Directive, Behavior, BehaviorMode,
    ActorKind, VisionCone,
)

# ── Social ───────────────────────────────────────────────────────────
from components.social import Identity, Dialogue, Relationship, Vitals

# ── World resources / singletons ─────────────────────────────────────
from components.resources import (
    GameTime, GameClock, UIMode, UIState, Transition, TextDisplay,
    PlayerState, PlayerKnowledge, ActorIndex,
)

# ── Diagnostics ──────────────────────────────────────────────────────
from components.dev_log import DevLog

__all__ = [
    # spatial
    "Position", "GridPos", "Facing",
    # ai
    "Patrol", "Waypoint", "Schedule", "Directive", "Behavior",
    "BehaviorMode", "ActorKind", "VisionCone",
    # social
    "Identity", "Dialogue", "Relationship", "Vitals",
    # resources
    "GameTime", "GameClock", "UIMode", "UIState", "Transition",
    "TextDisplay", "PlayerState", "PlayerKnowledge", "ActorIndex",
    # diagnostics
    "DevLog",
]
