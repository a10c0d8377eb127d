"""components.resources — World-level singletons (not per-actor)."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class GameTime:
    """Calendar time of day.

    ``hour`` / ``minute`` are floored integers for period lookups;
    ``fraction`` is the sub-minute remainder carried between ticks so
    that many short frames still add up to whole minutes.
    ``total_minutes`` is monotonic and continuous; use it for every
    "wait until" comparison.
    """
    day: int = 1
    hour: int = 6
    minute: int = 0
    total_minutes: float = 0.0
    fraction: float = 0.0


@dataclass
class GameClock:
    """The running clock resource.

    ``period`` is the id of the schedule period ``time`` falls in.
    ``wait_target`` is a ``total_minutes`` value the player is waiting
    for (``None`` when not waiting).
    """
    time: GameTime = field(default_factory=GameTime)
    period: str = ""
    scale: float = 1.0                  # game-minutes per real second
    wait_target: float | None = None


class UIMode(Enum):
    """What the player's input is currently driving."""
    NORMAL = "normal"
    TEXT = "text"
    MENU = "menu"
    INVENTORY = "inventory"
    DIALOGUE = "dialogue"


@dataclass
class UIState:
    mode: UIMode = UIMode.NORMAL


@dataclass
class Transition:
    """Room-change fade.  ``phase`` is '', 'fade_out' or 'fade_in'."""
    phase: str = ""
    elapsed_ms: float = 0.0
    target_room: str = ""
    target_spawn: str = ""

    @property
    def active(self) -> bool:
        return self.phase != ""


@dataclass
class TextDisplay:
    """Plain text box (examine results, refusals).  Clock keeps running."""
    text: str = ""
    title: str = ""
    visible: bool = False


@dataclass
class PlayerState:
    """The player as the core sees it: room, grid cell, stance."""
    location: str = ""
    col: int = 0
    row: int = 0
    facing: str = "down"
    sneaking: bool = False


@dataclass
class PlayerKnowledge:
    """Append-only set of facts the player has learned (ordered)."""
    tokens: list[str] = field(default_factory=list)

    def learn(self, token: str) -> bool:
        """Add *token*; return False if it was already known."""
        if token in self.tokens:
            return False
        self.tokens.append(token)
        return True

    def knows(self, token: str) -> bool:
        return token in self.tokens


@dataclass
class ActorIndex:
    """actor_id → entity id, filled by the content loader."""
    ids: dict[str, int] = field(default_factory=dict)
