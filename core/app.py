"""
core/app.py — Window, fonts and the host loop

Each frame the loop measures the real milliseconds since the previous
one, caps them (a dragged window or a breakpoint must not fast-forward
the prison day), and hands them to the active scene, which passes them
on to ``tick_simulation``.

    app = App(world=build_world())
    app.push_scene(CellblockScene())
    app.run()
"""

from __future__ import annotations
import pygame
from core.constants import MAX_FRAME_MS
from core.ecs import World
from core.scene import Scene
from core.tuning import get as _tun

WHITE = (255, 255, 255)
HUD_BACKING = (0, 0, 0, 160)
FONT_FACE = "monospace"


class App:
    def __init__(self, title: str = "Cellblock", width: int = 960, height: int = 640,
                 world: World | None = None, fps: int = 60):
        pygame.init()
        self.window = pygame.display.set_mode((width, height))
        pygame.display.set_caption(title)
        self.ticker = pygame.time.Clock()
        self.fps = fps
        self.dt_ms = 0.0
        self.running = True
        self.world = World() if world is None else world
        self.font, self.font_sm, self.font_lg = (
            pygame.font.SysFont(FONT_FACE, size) for size in (14, 11, 18))
        self._stack: list[Scene] = []

    # ── Scenes ──────────────────────────────────────────────────────

    @property
    def scene(self) -> Scene | None:
        return self._stack[-1] if self._stack else None

    def push_scene(self, scene: Scene):
        covered = self.scene
        if covered is not None:
            covered.on_exit(self)
        self._stack.append(scene)
        scene.on_enter(self)

    def pop_scene(self):
        if self._stack:
            self._stack.pop().on_exit(self)
        revealed = self.scene
        if revealed is not None:
            revealed.on_enter(self)

    # ── Loop ────────────────────────────────────────────────────────

    def run(self):
        print(f"[MAIN] Loop started, {self.fps} fps cap")
        try:
            while self.running:
                self.frame(float(self.ticker.tick(self.fps)))
        finally:
            pygame.quit()
        print("[MAIN] Window closed")

    def frame(self, elapsed_ms: float):
        """Input, then one simulation step, then draw."""
        cap = _tun("clock", "max_frame_ms", MAX_FRAME_MS)
        self.dt_ms = elapsed_ms if elapsed_ms < cap else cap

        active = self.scene
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif active is not None:
                active.handle_event(event, self)

        if active is None or not self.running:
            return
        active.update(self.dt_ms, self)
        active.draw(self.window, self)
        pygame.display.flip()

    # ── Text ────────────────────────────────────────────────────────

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color=WHITE, font=None) -> pygame.Rect:
        rendered = (font or self.font).render(text, True, color)
        return surface.blit(rendered, (x, y))

    def draw_text_bg(self, surface: pygame.Surface, text: str, x: int, y: int,
                     color=WHITE, font=None, backing=HUD_BACKING) -> pygame.Rect:
        """``draw_text`` over a translucent box, for HUD lines."""
        rendered = (font or self.font).render(text, True, color)
        box = pygame.Surface(rendered.get_rect().inflate(4, 4).size, pygame.SRCALPHA)
        box.fill(backing)
        surface.blit(box, (x - 2, y - 2))
        return surface.blit(rendered, (x, y))
