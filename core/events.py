"""core/events.py — Lightweight event bus.

Simulation systems announce what happened (a period change or a
guard spotting the player) without knowing who listens.
The bus lives as an ECS resource::

    from core.events import EventBus
    bus = world.res(EventBus)
    bus.emit(PlayerSpotted(eid=4, actor_id="guard_martinez", level=0.8))

Listeners outside the simulation (main.py, the story layer) subscribe
by class or by class name::

    bus.subscribe(StoryEvent, on_story_event)

Events are plain dataclasses and carry ids, never component objects.
"""

from __future__ import annotations
import traceback
from dataclasses import dataclass, field
from typing import Any, Callable
from collections import defaultdict


# ═══════════════════════════════════════════════════════════════════
#  Event definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class PeriodChanged:
    """The clock crossed into a new schedule period."""
    old_period: str = ""
    new_period: str = ""
    day: int = 1


@dataclass
class PlayerSpotted:
    """A guard's detection of the player crossed the reaction threshold."""
    eid: int = 0
    actor_id: str = ""
    level: float = 0.0


@dataclass
class RelocationDeferred:
    """A scheduled move was held back because the player could see it."""
    eid: int = 0
    actor_id: str = ""
    from_location: str = ""
    to_location: str = ""


@dataclass
class ActorRelocated:
    """An actor was placed in a new room by its schedule."""
    eid: int = 0
    actor_id: str = ""
    from_location: str = ""
    to_location: str = ""


@dataclass
class DialogueStarted:
    eid: int = 0
    actor_id: str = ""
    tree_id: str = ""
    node_id: str = ""


@dataclass
class DialogueEnded:
    eid: int = 0
    actor_id: str = ""
    tree_id: str = ""
    cancelled: bool = False


@dataclass
class KnowledgeLearned:
    token: str = ""
    source_actor: str = ""


@dataclass
class ItemGranted:
    """A dialogue effect hands the player an item (inventory is external)."""
    item_id: str = ""
    source_actor: str = ""


@dataclass
class StoryEvent:
    """A dialogue effect fires a named story event for outside listeners."""
    event_id: str = ""
    source_actor: str = ""
    data: dict[str, Any] = field(default_factory=dict)


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

# Handlers that keep emitting can't hold a tick forever.
MAX_DRAIN_ROUNDS = 100


def _key(event_type) -> str:
    return event_type if isinstance(event_type, str) else event_type.__name__


class EventBus:
    """Queue of simulation events, stored as an ECS resource.

    Events emitted during a tick wait here until ``tick_simulation``
    drains them at the end of the tick, so listeners always see the
    world after the tick's patches were applied.
    """

    def __init__(self):
        self._queue: list[Any] = []
        self._handlers: dict[str, list[Callable]] = defaultdict(list)

    def emit(self, event) -> None:
        self._queue.append(event)

    def subscribe(self, event_type, handler: Callable) -> None:
        """Call *handler* for every drained event of *event_type*.

        *event_type* is an event class or its name (``"StoryEvent"``).
        """
        self._handlers[_key(event_type)].append(handler)

    def pending(self, event_type=None) -> list[Any]:
        """Queued events not drained yet, optionally of one type."""
        if event_type is None:
            return list(self._queue)
        name = _key(event_type)
        return [e for e in self._queue if type(e).__name__ == name]

    def drain(self) -> int:
        """Deliver queued events in emit order; returns how many.

        Events emitted by handlers join the same drain, one round
        after the events that caused them.
        """
        delivered = 0
        for _ in range(MAX_DRAIN_ROUNDS):
            if not self._queue:
                break
            batch, self._queue = self._queue, []
            for event in batch:
                for handler in self._handlers.get(type(event).__name__, ()):
                    try:
                        handler(event)
                    except Exception:
                        print(f"[EVENT] {type(event).__name__} handler {handler!r} failed")
                        traceback.print_exc()
            delivered += len(batch)
        else:
            if self._queue:
                print(f"[EVENT] {len(self._queue)} events left after {MAX_DRAIN_ROUNDS} rounds")
        return delivered
