"""logic/actors.py — Actor lookup and the single write path for actor state.

Actors are ECS entities keyed by their content id through the
``ActorIndex`` resource.  Inside the actor pass, changes are staged in
the PatchBatch.  Everything else (schedule directives and relocations,
conversation hand-off, dialogue effects) writes through
``update_actor``.  The ai helpers that decide those writes return
field dicts and never assign themselves.
"""

from __future__ import annotations

from components import ActorIndex, Identity, Position


def actor_eid(world, actor_id: str) -> int | None:
    index = world.res(ActorIndex)
    if index is None:
        return None
    return index.ids.get(actor_id)


def actors_sorted(world) -> list[tuple[str, int]]:
    """``(actor_id, eid)`` for every actor, in actor-id order."""
    index = world.res(ActorIndex)
    if index is None:
        return []
    return sorted(index.ids.items())


def actors_in_location(world, location: str) -> list[tuple[str, int]]:
    """``(actor_id, eid)`` for actors standing in *location*, in actor-id order."""
    found = []
    for eid, ident, pos in world.query_location(location, Identity, Position):
        if pos.location == location:
            found.append((ident.actor_id, eid))
    found.sort()
    return found


def update_actor(world, actor_id: str, comp_type: type, **changes) -> bool:
    """Set fields on one of an actor's components.  False if nothing matched."""
    eid = actor_eid(world, actor_id)
    if eid is None:
        return False
    comp = world.get(eid, comp_type)
    if comp is None:
        return False
    for name, value in changes.items():
        setattr(comp, name, value)
    return True
