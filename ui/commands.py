"""ui.commands — Command objects emitted by modals.

Modals never touch the dialogue engine or world state themselves; they
return these and the scene applies each one.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class NavigateDialogue:
    """Move the response highlight (-1 up, +1 down, wrapping)."""
    delta: int


@dataclass(frozen=True, slots=True)
class SelectResponse:
    """Choose a response; ``None`` means the highlighted one."""
    index: int | None = None


@dataclass(frozen=True, slots=True)
class CancelDialogue:
    """Walk away from the conversation."""


@dataclass(frozen=True, slots=True)
class DismissText:
    """Close the plain text box."""


UICommand = Union[NavigateDialogue, SelectResponse, CancelDialogue, DismissText]
