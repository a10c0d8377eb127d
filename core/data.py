"""
core/data.py — TOML → ECS loader

Reads the content files under ``data/`` and turns them into entities,
resources, and registries:

    periods.toml        → logic.clock.PERIODS
    rooms.toml          → core.room.ROOMS
    restrictions.toml   → logic.restrictions.DOORS / AREAS
    dialogue.toml       → DialogueManager resource
    actors.toml         → one entity per [actor.<id>] + ActorIndex,
                          PlayerState from [player]

Usage:
    loader = ContentLoader(world)
    ids = loader.load_actors("data/actors.toml")    # {actor_id: eid}

Content may be partial: a missing file is reported and skipped, and a
bad value in one actor falls back to the field's default.
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
from pathlib import Path
from typing import Any

from core.ecs import World
from components import (
    ActorIndex, ActorKind, Behavior, BehaviorMode, Dialogue, Directive,
    Facing, GridPos, Identity, Patrol, PlayerState, Position, Relationship,
    Schedule, VisionCone, Vitals, Waypoint,
)
from components.spatial import DIRECTIONS


DATA_DIR = Path(__file__).resolve().parent.parent / "data"


# ── Field helpers ────────────────────────────────────────────────────

def _enum(enum_type, value: Any, default, where: str):
    try:
        return enum_type(value)
    except ValueError:
        print(f"[CONTENT] {where}: unknown {enum_type.__name__} {value!r}, "
              f"using {default.value!r}")
        return default


def _direction(value: Any, default: str, where: str) -> str:
    if value in DIRECTIONS:
        return value
    if value:
        print(f"[CONTENT] {where}: bad facing {value!r}")
    return default


def _waypoint(raw: dict, where: str) -> Waypoint:
    return Waypoint(
        location=str(raw.get("location", "")),
        col=int(raw.get("col", 0)),
        row=int(raw.get("row", 0)),
        wait=float(raw.get("wait", 0.0)),
        facing=_direction(raw.get("facing", ""), "", where),
    )


def _schedule(raw: dict, where: str) -> Schedule:
    directives = {}
    for period_id, d in raw.items():
        directives[period_id] = Directive(
            behavior=_enum(BehaviorMode, d.get("behavior", "idle"),
                           BehaviorMode.IDLE, f"{where}.{period_id}"),
            location=str(d.get("location", "")),
        )
    return Schedule(directives=directives)


# ── Loader ───────────────────────────────────────────────────────────

class ContentLoader:
    def __init__(self, world: World):
        self.world = world

    @staticmethod
    def read(path: str | Path) -> dict:
        """Parse a TOML file; a missing file reads as empty."""
        path = Path(path)
        if not path.exists():
            print(f"[CONTENT] {path} not found — skipping")
            return {}
        with open(path, "rb") as f:
            return tomllib.load(f)

    # -- Static content --

    def load_periods(self, path: str | Path) -> int:
        from logic.clock import load_periods
        n = load_periods(self.read(path).get("period", []))
        if n:
            print(f"[CONTENT] Loaded {n} periods")
        return n

    def load_rooms(self, path: str | Path) -> list[str]:
        from core.room import register_room, room_from_dict
        loaded = []
        for room_id, raw in self.read(path).get("room", {}).items():
            register_room(room_from_dict(room_id, raw))
            loaded.append(room_id)
        print(f"[CONTENT] Loaded {len(loaded)} rooms")
        return loaded

    def load_restrictions(self, path: str | Path) -> tuple[int, int]:
        from logic.restrictions import load_restrictions
        doors, areas = load_restrictions(self.read(path))
        print(f"[CONTENT] Loaded {doors} time-locked doors, {areas} area rules")
        return doors, areas

    def load_dialogue(self, path: str | Path) -> int:
        from logic.dialogue import DialogueManager
        manager = self.world.res(DialogueManager)
        if manager is None:
            manager = DialogueManager()
            self.world.set_res(manager)
        n = manager.load(self.read(path))
        print(f"[CONTENT] Loaded {n} dialogue trees")
        return n

    # -- Actors --

    def spawn_actor(self, actor_id: str, raw: dict) -> int:
        """Create one actor entity from its ``[actor.<id>]`` table."""
        w = self.world
        where = f"actor.{actor_id}"
        eid = w.spawn()

        location = str(raw.get("location", ""))
        col, row = int(raw.get("col", 0)), int(raw.get("row", 0))
        kind = _enum(ActorKind, raw.get("kind", "inmate"), ActorKind.INMATE, where)

        w.add(eid, Identity(actor_id, raw.get("name", actor_id), kind))
        w.add(eid, Position(float(col), float(row), location))
        w.add(eid, GridPos(col, row))
        w.add(eid, Facing(_direction(raw.get("facing", "down"), "down", where)))
        w.location_add(eid, location)

        mode = _enum(BehaviorMode, raw.get("behavior", "idle"), BehaviorMode.IDLE, where)
        w.add(eid, Behavior(mode=mode, resume_mode=mode))

        vision = raw.get("vision", {})
        w.add(eid, VisionCone(range=float(vision.get("range", 0.0)),
                              angle=float(vision.get("angle", 0.0))))

        patrol = raw.get("patrol", {})
        w.add(eid, Patrol(
            route=[_waypoint(wp, where) for wp in patrol.get("route", [])],
            speed=float(patrol.get("speed", 0.0)),
        ))
        w.add(eid, _schedule(raw.get("schedule", {}), where))

        rel = raw.get("relationship", {})
        w.add(eid, Relationship(
            level=int(rel.get("level", 0)),
            flags={str(k): bool(v) for k, v in rel.get("flags", {}).items()},
        ))
        w.add(eid, Dialogue(str(raw.get("dialogue", ""))))
        w.add(eid, Vitals(bool(raw.get("conscious", True)), bool(raw.get("alive", True))))
        return eid

    def load_actors(self, path: str | Path) -> dict[str, int]:
        """Spawn every actor and fill the ActorIndex.  Returns {actor_id: eid}."""
        data = self.read(path)
        index = self.world.res(ActorIndex)
        if index is None:
            index = ActorIndex()
            self.world.set_res(index)

        ids: dict[str, int] = {}
        for actor_id in sorted(data.get("actor", {})):
            eid = self.spawn_actor(actor_id, data["actor"][actor_id])
            ids[actor_id] = eid
            index.ids[actor_id] = eid

        player = data.get("player")
        if player:
            state = self.world.res(PlayerState)
            if state is None:
                state = PlayerState()
                self.world.set_res(state)
            state.location = str(player.get("location", ""))
            state.col = int(player.get("col", 0))
            state.row = int(player.get("row", 0))
            state.facing = _direction(player.get("facing", "down"), "down", "player")

        print(f"[CONTENT] Spawned {len(ids)} actors")
        return ids

    def load_all(self, data_dir: str | Path | None = None) -> dict[str, int]:
        """Load every content file from *data_dir* (default ``data/``)."""
        root = Path(data_dir) if data_dir is not None else DATA_DIR
        self.load_periods(root / "periods.toml")
        self.load_rooms(root / "rooms.toml")
        self.load_restrictions(root / "restrictions.toml")
        self.load_dialogue(root / "dialogue.toml")
        return self.load_actors(root / "actors.toml")
