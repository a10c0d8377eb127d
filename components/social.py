"""components.social — Identity, conversation hooks, and standing with the player."""

from __future__ import annotations
from dataclasses import dataclass, field

from components.ai import ActorKind


@dataclass
class Identity:
    """Who the actor is.  ``actor_id`` is the stable content key."""
    actor_id: str = ""
    name: str = ""
    kind: ActorKind = ActorKind.INMATE


@dataclass
class Dialogue:
    """Marks an actor as talkable and references its dialogue tree.

    ``tree_id`` is the key into DialogueManager's tree registry; an
    empty id means the actor has nothing to say.
    """
    tree_id: str = ""


@dataclass
class Relationship:
    """The actor's standing with the player.

    ``level`` is clamped to −100…100.
    ``talked_to`` flips on the first conversation and selects the
    return greeting afterwards.
    ``flags`` remember past interaction outcomes ("told_about_vents").
    """
    level: int = 0
    talked_to: bool = False
    flags: dict[str, bool] = field(default_factory=dict)

    def flag(self, name: str) -> bool:
        return self.flags.get(name, False)


@dataclass
class Vitals:
    conscious: bool = True
    alive: bool = True
