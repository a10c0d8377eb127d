"""ui/text_modal.py — Plain text box (refusals, examine results).

Unlike the dialogue box this one does not stop the clock.
"""

from __future__ import annotations
import pygame
from components import TextDisplay
from ui.modal import Modal
from ui.commands import DismissText, UICommand
from ui.helpers import bottom_box, draw_panel, wrap_text


class TextModal(Modal):
    def __init__(self):
        self.title = ""
        self.text = ""
        self.finished = False

    def sync(self, world) -> None:
        display = world.res(TextDisplay)
        if display is None or not display.visible:
            self.finished = True
            return
        self.title = display.title
        self.text = display.text

    def handle_event(self, event: pygame.event.Event) -> list[UICommand]:
        if event.type == pygame.KEYDOWN and event.key in (
                pygame.K_RETURN, pygame.K_SPACE, pygame.K_e, pygame.K_ESCAPE):
            return [DismissText()]
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            return [DismissText()]
        return []

    def draw(self, surface: pygame.Surface, app):
        font = app.font
        line_h = font.get_linesize() + 4
        lines = wrap_text(self.text, font, surface.get_width() - 64)
        top = 32 if self.title else 10
        box = bottom_box(surface, top + line_h * len(lines) + 28)
        draw_panel(surface, box)
        if self.title:
            app.draw_text(surface, self.title, box.x + 12, box.y + 8,
                          (255, 220, 100), font=app.font_lg)
        y = box.y + top
        for line in lines:
            app.draw_text(surface, line, box.x + 16, y, (220, 220, 220))
            y += line_h
        app.draw_text(surface, "[Enter]", box.right - 80, box.bottom - 20,
                      (120, 120, 130), font=app.font_sm)
