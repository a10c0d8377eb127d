"""logic/patches.py — Per-tick batch of staged component updates.

Systems never write actor components directly during the actor pass.
They stage field changes here and the tick applies the whole batch
once, in staging order, after every actor has been evaluated::

    batch = world.res(PatchBatch)
    batch.stage(eid, Behavior, alertness=42.0)
    ...
    batch.apply(world)      # end of tick

A later stage of the same field on the same component wins.
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class Patch:
    eid: int
    comp_type: type
    changes: dict


@dataclass
class PatchBatch:
    patches: list[Patch] = field(default_factory=list)

    def stage(self, eid: int, comp_type: type, **changes) -> None:
        if changes:
            self.patches.append(Patch(eid, comp_type, changes))

    def stage_all(self, eid: int, patch: dict[type, dict]) -> None:
        """Stage a ``{component type: {field: value}}`` mapping."""
        for comp_type, changes in patch.items():
            self.stage(eid, comp_type, **changes)

    def apply(self, world) -> int:
        """Write every staged change into the world and empty the batch.

        Patches for components the entity no longer has are dropped.
        Returns the number of patches applied.
        """
        applied = 0
        for p in self.patches:
            comp = world.get(p.eid, p.comp_type)
            if comp is None:
                continue
            for name, value in p.changes.items():
                setattr(comp, name, value)
            applied += 1
        self.patches.clear()
        return applied

    def pending_for(self, eid: int) -> list[Patch]:
        return [p for p in self.patches if p.eid == eid]

    def __len__(self) -> int:
        return len(self.patches)
