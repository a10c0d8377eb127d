"""logic/tick.py — Per-frame simulation pipeline.

One call per host frame::

    tick_simulation(world, dt_ms)

Order:
  1. clock advances (frozen by modal UI / room transitions); a period
     change applies the schedule
  2. deferred relocations are retried
  3. room transition fade advances
  4. unless a conversation is open, every actor in the player's room
     (actor-id order) stages its patrol step and alertness change,
     all reading the same start-of-tick state; actors elsewhere only
     stage alertness decay and cooldown
  5. the patch batch is applied
  6. the first guard that spotted the player opens a confrontation
  7. the event bus drains
"""

from __future__ import annotations
import traceback
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from components import (
    Behavior, Facing, GameClock, GridPos, Identity, Patrol, PlayerState,
    Position, Transition, UIMode, UIState, VisionCone, Vitals,
)
from components.dev_log import log_actor
from core.events import EventBus, PeriodChanged, PlayerSpotted
from core.room import get_room
from logic.actors import actors_in_location, actors_sorted
from logic.ai.behavior import mode_patrols, ready_to_react, update_alertness
from logic.ai.patrol import update_patrol
from logic.ai.perception import detection_level, should_react
from logic.clock import clock_may_advance, tick_clock
from logic.dialogue import DialogueSessionState, start_confrontation
from logic.patches import PatchBatch
from logic.player import update_transition
from logic.schedule import apply_schedule, retry_pending_relocations

if TYPE_CHECKING:
    from core.ecs import World


@dataclass
class TickReport:
    """What happened this frame (the tests and the debug HUD read it)."""
    clock_advanced: bool = False
    period_changed: bool = False
    period: str = ""
    actors_updated: int = 0
    spotted_by: list[str] = field(default_factory=list)


def _update_actor(world: "World", eid: int, player: PlayerState, room,
                  dt: float, batch: PatchBatch) -> float:
    """Stage one actor's changes; return its detection level of the player."""
    vitals = world.get(eid, Vitals)
    if vitals is not None and not (vitals.conscious and vitals.alive):
        return 0.0
    pos = world.get(eid, Position)
    grid = world.get(eid, GridPos)
    facing = world.get(eid, Facing) or Facing()
    behavior = world.get(eid, Behavior)
    patrol = world.get(eid, Patrol)
    cone = world.get(eid, VisionCone)

    if patrol is not None and behavior is not None and mode_patrols(behavior.mode):
        batch.stage_all(eid, update_patrol(patrol, pos, facing, dt))

    level = 0.0
    if cone is not None and grid is not None:
        level = detection_level((grid.col, grid.row), facing.direction, cone,
                                (player.col, player.row), player.sneaking, room)
    if behavior is not None:
        batch.stage(eid, Behavior, **update_alertness(behavior, level, dt))
    return level


def tick_simulation(world: "World", dt_ms: float) -> TickReport:
    """Run every simulation system for one frame of *dt_ms* real milliseconds."""
    report = TickReport()
    dt_ms = max(0.0, dt_ms)
    dt = dt_ms / 1000.0
    bus = world.res(EventBus)

    # 1. Clock and schedule
    clock = world.res(GameClock)
    old_period = clock.period if clock else ""
    result = tick_clock(world, dt_ms)
    if result is not None:
        report.clock_advanced = True
        report.period = result.new_period
        if result.period_changed:
            report.period_changed = True
            print(f"[CLOCK] Day {result.new_time.day} — {result.new_period}")
            if bus is not None:
                bus.emit(PeriodChanged(old_period, result.new_period, result.new_time.day))
            apply_schedule(world, result.new_period)

    # 2. Deferred relocations
    retry_pending_relocations(world)

    # 3. Room transition
    update_transition(world, dt_ms)

    # 4. Actor pass
    player = world.res(PlayerState)
    batch = world.res(PatchBatch)
    session = world.res(DialogueSessionState)
    ui = world.res(UIState)
    trans = world.res(Transition)
    frozen = not clock_may_advance(ui.mode if ui else UIMode.NORMAL,
                                   bool(trans and trans.active))
    spotters: list[int] = []

    if player is not None and batch is not None and not frozen \
            and not (session and session.active):
        room = get_room(player.location)
        present = actors_in_location(world, player.location)
        for actor_id, eid in present:
            try:
                level = _update_actor(world, eid, player, room, dt, batch)
            except Exception as exc:
                traceback.print_exc()
                log_actor(world, eid, "error", f"actor update crash: {exc}")
                continue
            report.actors_updated += 1
            ident = world.get(eid, Identity)
            behavior = world.get(eid, Behavior)
            if ident is None or behavior is None:
                continue
            if ready_to_react(ident.kind, behavior) and should_react(ident.kind, level):
                spotters.append(eid)
                report.spotted_by.append(actor_id)
                log_actor(world, eid, "behavior", f"spotted player ({level:.2f})")
                if bus is not None:
                    bus.emit(PlayerSpotted(eid, actor_id, level))

        # Actors elsewhere hold still but keep calming down.
        here = {eid for _, eid in present}
        for actor_id, eid in actors_sorted(world):
            behavior = world.get(eid, Behavior)
            if eid not in here and behavior is not None:
                batch.stage(eid, Behavior, **update_alertness(behavior, 0.0, dt))

    # 5. Apply
    if batch is not None:
        batch.apply(world)

    # 6. Reaction
    if spotters:
        start_confrontation(world, spotters[0])

    # 7. Events
    if bus is not None:
        bus.drain()

    return report
