"""core/bootstrap.py — World bootstrap helpers.

Extracted from main.py so the tests can build the same world headless.
Handles:
  - Registering every world resource the systems expect
  - Loading tuning and TOML content
  - Starting the clock and applying the opening period's schedule
"""

from __future__ import annotations
from pathlib import Path

from components import (
    DevLog, GameClock, PlayerKnowledge, PlayerState, TextDisplay, Transition,
    UIState,
)
from core import tuning
from core.constants import TIME_SCALE
from core.data import DATA_DIR, ContentLoader
from core.ecs import World
from core.events import EventBus
from logic.clock import initial_time, period_for_time
from logic.dialogue import DialogueManager, DialogueSessionState
from logic.patches import PatchBatch
from logic.schedule import apply_schedule


# ── World resources ──────────────────────────────────────────────────

def setup_world_resources(world: World) -> None:
    """Register every singleton resource that is not already present."""
    start = initial_time()
    defaults = (
        GameClock(time=start, period=period_for_time(start.hour, start.minute),
                  scale=tuning.get("clock", "time_scale", TIME_SCALE)),
        UIState(),
        Transition(),
        TextDisplay(),
        PlayerState(),
        PlayerKnowledge(),
        EventBus(),
        DevLog(),
        PatchBatch(),
        DialogueManager(),
        DialogueSessionState(),
    )
    for res in defaults:
        if world.res(type(res)) is None:
            world.set_res(res)


# ── Full world ───────────────────────────────────────────────────────

def build_world(data_dir: str | Path | None = None, *,
                load_tuning: bool = True) -> World:
    """Create a world with all content loaded, ready to tick."""
    root = Path(data_dir) if data_dir is not None else DATA_DIR
    if load_tuning:
        tuning.load(root / "tuning.toml")

    world = World()
    setup_world_resources(world)
    ContentLoader(world).load_all(root)

    # The period table may have been replaced by periods.toml.
    clock = world.res(GameClock)
    clock.period = period_for_time(clock.time.hour, clock.time.minute)
    apply_schedule(world, clock.period)
    return world
