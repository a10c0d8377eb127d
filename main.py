"""
main.py — Bootstrap

1. Load tuning and content (rooms, periods, restrictions, dialogue, actors)
2. Create the app around that world
3. Hook story listeners onto the event bus
4. Push the cellblock scene
5. Run
"""

import sys
from pathlib import Path
from core.app import App
from core.bootstrap import build_world
from core.events import EventBus, ItemGranted, KnowledgeLearned, StoryEvent
from components import GameClock, PlayerState
from logic.clock import format_time
from scenes.cellblock_scene import CellblockScene


def _hook_story_events(bus: EventBus):
    """Items and story events have no in-game consumer yet; print them."""
    bus.subscribe(ItemGranted,
                  lambda e: print(f"[STORY] {e.source_actor} gave item '{e.item_id}'"))
    bus.subscribe(StoryEvent,
                  lambda e: print(f"[STORY] event '{e.event_id}' from {e.source_actor}"))
    bus.subscribe(KnowledgeLearned,
                  lambda e: print(f"[STORY] learned '{e.token}' from {e.source_actor}"))


def main():
    data_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    world = build_world(data_dir)

    bus = world.res(EventBus)
    if bus is not None:
        _hook_story_events(bus)

    clock = world.res(GameClock)
    player = world.res(PlayerState)
    print(f"[MAIN] Day {clock.time.day} {format_time(clock.time)} ({clock.period}), "
          f"player in {player.location} at ({player.col}, {player.row})")

    app = App(title="Cellblock", width=960, height=640, world=world)
    app.push_scene(CellblockScene())
    app.run()


if __name__ == "__main__":
    main()
