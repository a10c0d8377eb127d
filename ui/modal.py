"""ui.modal — Overlays that take the keyboard away from the map.

The cellblock has two: the dialogue box and the text box.  Neither
owns any game state.  Each frame a modal re-reads the world resource
it mirrors (the dialogue session, the text display) in ``sync``, and
key presses come back out as ``ui.commands`` objects that the scene
turns into engine calls.  When the mirrored state goes away the modal
marks itself finished and the stack drops it.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import pygame

if TYPE_CHECKING:
    from ui.commands import UICommand


class Modal(ABC):
    finished: bool = False

    @abstractmethod
    def sync(self, world) -> None:
        ...

    @abstractmethod
    def handle_event(self, event: pygame.event.Event) -> list[UICommand]:
        ...

    @abstractmethod
    def draw(self, surface: pygame.Surface, app) -> None:
        ...


class ModalStack:
    """Open modals, oldest first.  Only the newest sees key presses."""

    def __init__(self) -> None:
        self._open: list[Modal] = []

    @property
    def active(self) -> Modal | None:
        return self._open[-1] if self._open else None

    @property
    def is_open(self) -> bool:
        return self.active is not None

    def push(self, modal: Modal) -> None:
        self._open.append(modal)

    def find(self, modal_type: type) -> Modal | None:
        return next((m for m in self._open if isinstance(m, modal_type)), None)

    def handle_event(self, event: pygame.event.Event) -> list[UICommand]:
        top = self.active
        return top.handle_event(event) if top is not None else []

    def sync(self, world) -> None:
        for modal in self._open:
            modal.sync(world)
        self._open = [m for m in self._open if not m.finished]

    def draw(self, surface: pygame.Surface, app) -> None:
        for modal in self._open:
            modal.draw(surface, app)
