"""logic/schedule.py — Apply per-period directives to every actor.

Runs only when the clock reports a period change.  For each actor (in
actor-id order) the directive for the new period may change its
behaviour mode and move it to another room.

A move is only carried out while the player can witness neither end of
it: neither the room the actor leaves nor the room it arrives in is
the player's room.  Otherwise the target is parked in
``Schedule.pending_location`` and ``retry_pending_relocations`` tries
again every tick, so the actor "slips away" the moment the player
looks elsewhere.
"""

from __future__ import annotations

from components import (
    Behavior, GridPos, Identity, Patrol, PlayerState, Position, Schedule,
)
from components.dev_log import log_actor
from core.events import ActorRelocated, EventBus, RelocationDeferred
from core.room import get_room
from logic.actors import actor_eid, actors_sorted, update_actor
from logic.ai.behavior import directive_changes


# ── Relocation ───────────────────────────────────────────────────────

def spawn_point(world, eid: int, location: str) -> tuple[int, int] | None:
    """Where an actor appears when it arrives in *location*.

    Its first patrol waypoint in that room, else the room's ``npc``
    spawn, else the room's start cell.  ``None`` if the room is unknown.
    """
    patrol = world.get(eid, Patrol)
    if patrol is not None:
        for wp in patrol.route:
            if wp.location == location:
                return wp.col, wp.row
    room = get_room(location)
    if room is None:
        return None
    return room.spawn("npc") or room.start


def relocate(world, eid: int, location: str) -> bool:
    """Teleport actor *eid* into *location* and reset its movement."""
    pos = world.get(eid, Position)
    if pos is None:
        return False
    cell = spawn_point(world, eid, location)
    if cell is None:
        print(f"[SCHEDULE] No room {location!r}; e{eid} stays in {pos.location}")
        return False

    actor_id = _actor_id(world, eid)
    if actor_eid(world, actor_id) != eid:
        print(f"[SCHEDULE] e{eid} is not an indexed actor; not moved")
        return False

    old = pos.location
    col, row = cell
    update_actor(world, actor_id, Position, x=float(col), y=float(row), location=location)
    update_actor(world, actor_id, GridPos, col=col, row=row)
    patrol = world.get(eid, Patrol)
    if patrol is not None:
        index = next((i for i, wp in enumerate(patrol.route)
                      if wp.location == location and (wp.col, wp.row) == cell),
                     patrol.index)
        update_actor(world, actor_id, Patrol,
                     moving=False, target=None, wait_timer=0.0, index=index)
    world.location_set(eid, location)
    update_actor(world, actor_id, Schedule, pending_location="")

    log_actor(world, eid, "schedule", f"relocated {old} → {location}",
              details={"col": col, "row": row})
    bus = world.res(EventBus)
    if bus is not None:
        bus.emit(ActorRelocated(eid, actor_id, old, location))
    return True


def _actor_id(world, eid: int) -> str:
    ident = world.get(eid, Identity)
    return ident.actor_id if ident else ""


def _player_location(world) -> str:
    player = world.res(PlayerState)
    return player.location if player else ""


def _move_or_defer(world, eid: int, pos: Position, sched: Schedule,
                   target: str) -> bool:
    here = _player_location(world)
    if here in (pos.location, target):
        if sched.pending_location != target:
            update_actor(world, _actor_id(world, eid), Schedule, pending_location=target)
            log_actor(world, eid, "schedule",
                      f"relocation to {target} deferred (player in {here})")
            bus = world.res(EventBus)
            if bus is not None:
                bus.emit(RelocationDeferred(eid, _actor_id(world, eid),
                                            pos.location, target))
        return False
    return relocate(world, eid, target)


# ── Public API ───────────────────────────────────────────────────────

def apply_schedule(world, period_id: str) -> int:
    """Apply *period_id*'s directive to every actor.  Returns actors changed.

    An actor without an entry for the period keeps doing whatever its
    last directive said.
    """
    changed = 0
    for actor_id, eid in actors_sorted(world):
        sched = world.get(eid, Schedule)
        behavior = world.get(eid, Behavior)
        pos = world.get(eid, Position)
        if sched is None or behavior is None or pos is None:
            continue
        directive = sched.directives.get(period_id)
        if directive is None:
            continue

        changes = directive_changes(behavior, directive.behavior)
        update_actor(world, actor_id, Behavior, **changes)
        touched = "mode" in changes
        if touched:
            log_actor(world, eid, "schedule",
                      f"directive → {directive.behavior.value}",
                      details={"period": period_id})

        # A fresh directive replaces any move still waiting to happen.
        update_actor(world, actor_id, Schedule, pending_location="")
        if directive.location and directive.location != pos.location:
            touched = _move_or_defer(world, eid, pos, sched, directive.location) or touched
        if touched:
            changed += 1

    print(f"[SCHEDULE] Period {period_id}: {changed} actor(s) updated")
    return changed


def retry_pending_relocations(world) -> int:
    """Complete deferred moves the player can no longer witness."""
    moved = 0
    for actor_id, eid in actors_sorted(world):
        sched = world.get(eid, Schedule)
        pos = world.get(eid, Position)
        if sched is None or pos is None or not sched.pending_location:
            continue
        if sched.pending_location == pos.location:
            update_actor(world, actor_id, Schedule, pending_location="")
            continue
        if _player_location(world) in (pos.location, sched.pending_location):
            continue
        if relocate(world, eid, sched.pending_location):
            moved += 1
        else:
            update_actor(world, actor_id, Schedule, pending_location="")
    return moved
