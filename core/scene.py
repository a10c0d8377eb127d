"""core/scene.py — What the App drives each frame.

The cellblock game has a single scene, but the App keeps a stack so a
title or pause screen can sit on top later without touching the loop.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    """No-op defaults; subclasses override what they need."""

    def on_enter(self, app: App):
        pass

    def on_exit(self, app: App):
        pass

    def handle_event(self, event: pygame.event.Event, app: App):
        pass

    def update(self, dt_ms: float, app: App):
        pass

    def draw(self, surface: pygame.Surface, app: App):
        pass
