"""scenes/cellblock_draw.py — Rendering helpers for the cellblock scene.

Pure draw functions; each one gets the data it needs as parameters so
CellblockScene.draw() stays thin.  Everything is in tiles until it is
multiplied by ``TILE_SIZE`` here.
"""

from __future__ import annotations
import math
import pygame
from core.app import App
from core.constants import TILE_COLORS, TILE_SIZE
from core.room import Room
from components import (
    ActorKind, Behavior, BehaviorMode, Facing, GameClock, Identity,
    PlayerState, Position, Transition, VisionCone,
)
from components.dev_log import LogEntry
from logic.actors import actors_in_location
from logic.ai.perception import can_see_player, facing_to_angle
from logic.clock import format_time, get_period
from logic.restrictions import restriction_level


_KIND_COLORS = {
    ActorKind.GUARD: (70, 110, 200),
    ActorKind.INMATE: (220, 140, 60),
    ActorKind.STAFF: (160, 160, 160),
}


def room_origin(surface: pygame.Surface, room: Room) -> tuple[int, int]:
    """Pixel offset that centres *room* on *surface*."""
    sw, sh = surface.get_size()
    return (sw - room.width * TILE_SIZE) // 2, (sh - room.height * TILE_SIZE) // 2


# ── Tiles ───────────────────────────────────────────────────────────

def draw_room(surface: pygame.Surface, room: Room, ox: int, oy: int,
              show_grid: bool = False):
    for row in range(room.height):
        for col in range(room.width):
            color = TILE_COLORS.get(room.tile(col, row), (255, 0, 255))
            rect = pygame.Rect(ox + col * TILE_SIZE, oy + row * TILE_SIZE,
                               TILE_SIZE, TILE_SIZE)
            pygame.draw.rect(surface, color, rect)
            if show_grid:
                pygame.draw.rect(surface, (90, 90, 90), rect, 1)


# ── Actors ──────────────────────────────────────────────────────────

def draw_vision_cone(surface: pygame.Surface, cx: float, cy: float,
                     facing: str, cone: VisionCone, alert: float, sees_player: bool):
    if cone.range <= 0:
        return
    radius = cone.range * TILE_SIZE
    centre = math.radians(facing_to_angle(facing))
    half = math.radians(cone.angle / 2.0)
    points = [(cx, cy)]
    steps = 12
    for i in range(steps + 1):
        a = centre - half + (2 * half) * i / steps
        points.append((cx + math.cos(a) * radius, cy + math.sin(a) * radius))
    layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    red = min(255, 200 + int(alert * 0.55))
    # Solid while the player is actually in sight, faint otherwise.
    alpha = 110 if sees_player else 50
    pygame.draw.polygon(layer, (red, 220 - int(alert * 1.5), 80, alpha), points)
    surface.blit(layer, (0, 0))


def draw_actors(surface: pygame.Surface, app: App, location: str,
                ox: int, oy: int):
    world = app.world
    for actor_id, eid in actors_in_location(world, location):
        pos = world.get(eid, Position)
        ident = world.get(eid, Identity)
        facing = world.get(eid, Facing)
        cone = world.get(eid, VisionCone)
        behavior = world.get(eid, Behavior)
        px = ox + pos.x * TILE_SIZE
        py = oy + pos.y * TILE_SIZE
        cx, cy = px + TILE_SIZE / 2, py + TILE_SIZE / 2
        if cone is not None and facing is not None:
            draw_vision_cone(surface, cx, cy, facing.direction, cone,
                             behavior.alertness if behavior else 0.0,
                             can_see_player(world, eid))
        color = _KIND_COLORS.get(ident.kind if ident else None, (200, 200, 200))
        pygame.draw.circle(surface, color, (int(cx), int(cy)), TILE_SIZE // 2 - 3)
        if behavior is not None and behavior.mode is BehaviorMode.CONVERSATION:
            app.draw_text(surface, "...", int(px) + 8, int(py) - 14, (255, 255, 255),
                          font=app.font_sm)


def draw_player(surface: pygame.Surface, player: PlayerState, ox: int, oy: int):
    rect = pygame.Rect(ox + player.col * TILE_SIZE + 4, oy + player.row * TILE_SIZE + 4,
                       TILE_SIZE - 8, TILE_SIZE - 8)
    color = (120, 200, 120) if player.sneaking else (230, 230, 90)
    pygame.draw.rect(surface, color, rect)


# ── HUD ─────────────────────────────────────────────────────────────

def draw_hud(surface: pygame.Surface, app: App, room: Room):
    world = app.world
    clock = world.res(GameClock)
    player = world.res(PlayerState)
    if clock is not None:
        period = get_period(clock.period)
        label = period.name if period else clock.period
        waiting = "  (waiting)" if clock.wait_target is not None else ""
        app.draw_text_bg(surface, f"Day {clock.time.day}  {format_time(clock.time)}  "
                                  f"{label}{waiting}", 10, 10)
        level = restriction_level(room.id, clock.period)
        if level != "allowed":
            app.draw_text_bg(surface, f"{room.name}: {level.upper()}", 10, 30,
                             color=(255, 120, 120))
    if player is not None and player.sneaking:
        app.draw_text_bg(surface, "SNEAKING", surface.get_width() - 90, 10,
                         color=(120, 200, 120))
    app.draw_text(surface, "WASD move  E talk  C sneak  Z wait  Tab log",
                  10, surface.get_height() - 18, (130, 130, 130), font=app.font_sm)


def draw_fade(surface: pygame.Surface, trans: Transition, half_ms: float):
    if not trans.active or half_ms <= 0:
        return
    t = min(1.0, trans.elapsed_ms / half_ms)
    alpha = t if trans.phase == "fade_out" else 1.0 - t
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, int(255 * alpha)))
    surface.blit(overlay, (0, 0))


def draw_dev_log(surface: pygame.Surface, app: App, entries: list[LogEntry]):
    """Right-hand column of recent DevLog entries."""
    x = surface.get_width() - 380
    y = 40
    for e in entries:
        color = (255, 120, 120) if e.cat == "error" else (200, 200, 200)
        app.draw_text_bg(surface, e.line()[:60], x, y, color=color, font=app.font_sm)
        y += 14
