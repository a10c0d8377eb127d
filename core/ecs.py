"""
core/ecs.py — Entity-Component-System

Entities are ints. Components are any object, stored by type.
Every actor in the cellblock is one entity; the per-actor record is
split across components (Identity, Position, Patrol, Behavior, ...).

    w = World()
    e = w.spawn()
    w.add(e, Position(5.0, 3.0, location="corridor_b"))
    w.location_add(e, "corridor_b")

    for eid, ident, pos in w.query_location("corridor_b", Identity, Position):
        ...

Singletons that are not tied to an actor (clock, player, dialogue
session, patch batch) are *resources* stored under entity id -1.
"""

from __future__ import annotations
from typing import Any, Iterator

_RESOURCE_ID = -1


class World:
    def __init__(self):
        self._next_id = 0
        self._stores: dict[type, dict[int, Any]] = {}
        # room id → entity ids standing in it; the tick only ever
        # walks the player's room, so this replaces a full scan.
        self._rooms: dict[str, set[int]] = {}

    # -- Entities & components --

    def spawn(self) -> int:
        self._next_id += 1
        return self._next_id

    def add(self, eid: int, comp: Any):
        self._stores.setdefault(type(comp), {})[eid] = comp

    def get(self, eid: int, comp_type: type) -> Any | None:
        return self._stores.get(comp_type, {}).get(eid)

    # -- Location index --

    def location_add(self, eid: int, location: str):
        self._rooms.setdefault(location, set()).add(eid)

    def location_set(self, eid: int, new_location: str):
        """Move *eid* out of whichever room holds it and into *new_location*."""
        for members in self._rooms.values():
            members.discard(eid)
        self.location_add(eid, new_location)

    def query_location(self, location: str, *types: type) -> Iterator[tuple]:
        """Yield ``(eid, comp1, comp2, ...)`` for entities in *location*.

        Ascending entity-id order, so two walks over the same room agree.
        Entities missing any of *types* are skipped.
        """
        if not types:
            return
        stores = [self._stores.get(t, {}) for t in types]
        for eid in sorted(self._rooms.get(location, ())):
            if all(eid in s for s in stores):
                yield (eid, *(s[eid] for s in stores))

    # -- Resources (singletons, not tied to entities) --

    def set_res(self, resource: Any):
        self._stores.setdefault(type(resource), {})[_RESOURCE_ID] = resource

    def res(self, res_type: type) -> Any | None:
        return self._stores.get(res_type, {}).get(_RESOURCE_ID)
