"""ui/dialogue_modal.py — Conversation box for the open dialogue session."""

from __future__ import annotations
import pygame
from ui.modal import Modal
from ui.commands import CancelDialogue, NavigateDialogue, SelectResponse, UICommand
from ui.helpers import bottom_box, draw_overlay, draw_panel, wrap_text
from logic.dialogue import DialogueView, current_view


class DialogueModal(Modal):
    """Shows the current node of the dialogue session.

    The modal keeps no conversation state of its own: every frame it
    re-reads the session's DialogueView and finishes when the session
    closes.
    """

    def __init__(self):
        self.view: DialogueView | None = None
        self.finished = False
        self._response_rects: list[pygame.Rect] = []

    def sync(self, world) -> None:
        self.view = current_view(world)
        if self.view is None:
            self.finished = True

    def handle_event(self, event: pygame.event.Event) -> list[UICommand]:
        if self.view is None:
            return []
        if event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_w, pygame.K_UP):
                return [NavigateDialogue(-1)]
            if event.key in (pygame.K_s, pygame.K_DOWN):
                return [NavigateDialogue(1)]
            if event.key in (pygame.K_RETURN, pygame.K_SPACE, pygame.K_e):
                return [SelectResponse()]
            if event.key == pygame.K_ESCAPE:
                return [CancelDialogue()]
            if pygame.K_1 <= event.key <= pygame.K_9:
                return [SelectResponse(event.key - pygame.K_1)]
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for i, rect in enumerate(self._response_rects):
                if rect.collidepoint(event.pos):
                    return [SelectResponse(i)]
        return []

    def draw(self, surface: pygame.Surface, app):
        view = self.view
        if view is None:
            return
        draw_overlay(surface, alpha=120)

        font = app.font
        line_h = font.get_linesize() + 4
        inner_w = surface.get_width() - 64
        text_lines = wrap_text(view.text, font, inner_w)
        options = list(view.responses) or ["[Continue]"]
        box_h = 48 + line_h * len(text_lines) + 16 + 26 * len(options)
        box = bottom_box(surface, box_h)
        draw_panel(surface, box)

        app.draw_text(surface, view.speaker, box.x + 12, box.y + 8,
                      (255, 220, 100), font=app.font_lg)
        pygame.draw.line(surface, (80, 80, 90),
                         (box.x + 8, box.y + 32), (box.right - 8, box.y + 32))

        y = box.y + 40
        for line in text_lines:
            app.draw_text(surface, line, box.x + 16, y, (220, 220, 220))
            y += line_h

        y += 8
        pygame.draw.line(surface, (60, 60, 70), (box.x + 8, y), (box.right - 8, y))
        y += 8

        self._response_rects = []
        for i, label in enumerate(options):
            selected = i == view.selected
            rect = pygame.Rect(box.x + 12, y, box.w - 24, 24)
            if selected:
                pygame.draw.rect(surface, (50, 50, 60), rect)
            prefix = "> " if selected else "  "
            number = f"{i + 1}. " if view.responses else ""
            color = (255, 255, 255) if selected else (160, 160, 160)
            app.draw_text(surface, prefix + number + label, box.x + 16, y + 4, color)
            self._response_rects.append(rect)
            y += 26
