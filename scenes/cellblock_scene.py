"""
scenes/cellblock_scene.py — Playable top-down view of the cellblock

Keys go to the simulation as intents (move, talk, sneak, wait); every
frame ``tick_simulation`` runs with the frame's elapsed milliseconds.
While a modal is open (dialogue box, text box) it owns the keyboard
and its commands are routed into the dialogue engine here.

Tab toggles the DevLog overlay, F4 hot-reloads tuning, Esc quits.
"""

from __future__ import annotations
import pygame
from core.scene import Scene
from core.app import App
from core.constants import TRANSITION_MS
from core.room import get_room
from core import tuning as tuning_mod
from components import DevLog, PlayerState, TextDisplay, Transition
from logic.clock import begin_wait
from logic.dialogue import (
    DialogueSessionState, cancel_dialogue, navigate, select_response,
)
from logic.player import dismiss_text, move_player, show_text, talk_to_adjacent, toggle_sneak
from logic.tick import tick_simulation
from ui import (
    CancelDialogue, DialogueModal, DismissText, ModalStack, NavigateDialogue,
    SelectResponse, TextModal,
)
from scenes.cellblock_draw import (
    draw_actors, draw_dev_log, draw_fade, draw_hud, draw_player, draw_room,
    room_origin,
)


_MOVE_KEYS = {
    pygame.K_w: "up", pygame.K_UP: "up",
    pygame.K_s: "down", pygame.K_DOWN: "down",
    pygame.K_a: "left", pygame.K_LEFT: "left",
    pygame.K_d: "right", pygame.K_RIGHT: "right",
}


class CellblockScene(Scene):
    def __init__(self):
        self.modals = ModalStack()
        self.show_debug = False
        self.show_grid = False

    # -- Input --

    def handle_event(self, event: pygame.event.Event, app: App):
        world = app.world
        if self.modals.is_open:
            self.apply_commands(world, self.modals.handle_event(event))
            return
        if event.type != pygame.KEYDOWN:
            return

        if event.key in _MOVE_KEYS:
            move_player(world, _MOVE_KEYS[event.key])
        elif event.key == pygame.K_e:
            talk_to_adjacent(world)
        elif event.key == pygame.K_c:
            toggle_sneak(world)
        elif event.key == pygame.K_z:
            ok, message = begin_wait(world)
            if message:
                show_text(world, message)
        elif event.key == pygame.K_TAB:
            self.show_debug = not self.show_debug
        elif event.key == pygame.K_g:
            self.show_grid = not self.show_grid
        elif event.key == pygame.K_F4:
            tuning_mod.reload()
        elif event.key == pygame.K_ESCAPE:
            app.running = False
        self.sync_modals(world)

    def apply_commands(self, world, commands):
        for cmd in commands:
            if isinstance(cmd, NavigateDialogue):
                navigate(world, cmd.delta)
            elif isinstance(cmd, SelectResponse):
                select_response(world, cmd.index)
            elif isinstance(cmd, CancelDialogue):
                cancel_dialogue(world)
            elif isinstance(cmd, DismissText):
                dismiss_text(world)
        self.sync_modals(world)

    def sync_modals(self, world):
        """Open or drop modals so they mirror the session and text box."""
        self.modals.sync(world)
        session = world.res(DialogueSessionState)
        if session is not None and session.active and self.modals.find(DialogueModal) is None:
            modal = DialogueModal()
            modal.sync(world)
            self.modals.push(modal)
        display = world.res(TextDisplay)
        if display is not None and display.visible and self.modals.find(TextModal) is None:
            modal = TextModal()
            modal.sync(world)
            self.modals.push(modal)

    # -- Simulation --

    def update(self, dt_ms: float, app: App):
        tick_simulation(app.world, dt_ms)
        self.sync_modals(app.world)

    # -- Drawing --

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill((12, 12, 14))
        world = app.world
        player = world.res(PlayerState)
        room = get_room(player.location) if player else None
        if room is None:
            app.draw_text(surface, "No room loaded.", 20, 20, (255, 120, 120))
            return

        ox, oy = room_origin(surface, room)
        draw_room(surface, room, ox, oy, self.show_grid)
        draw_actors(surface, app, room.id, ox, oy)
        draw_player(surface, player, ox, oy)
        draw_hud(surface, app, room)

        trans = world.res(Transition)
        if trans is not None:
            draw_fade(surface, trans, tuning_mod.get("player", "transition_ms", TRANSITION_MS))

        if self.show_debug:
            log = world.res(DevLog)
            if log is not None:
                draw_dev_log(surface, app, log.recent(30))

        self.modals.draw(surface, app)
