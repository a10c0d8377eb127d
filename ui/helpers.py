"""ui.helpers — Shared drawing utilities for modal panels."""

from __future__ import annotations
import pygame


PANEL_BG = (30, 30, 35)
PANEL_BORDER = (100, 100, 110)


def draw_overlay(surface: pygame.Surface, alpha: int = 200) -> None:
    """Full-screen semi-transparent dark overlay."""
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, alpha))
    surface.blit(overlay, (0, 0))


def draw_panel(surface: pygame.Surface, rect: pygame.Rect) -> None:
    pygame.draw.rect(surface, PANEL_BG, rect)
    pygame.draw.rect(surface, PANEL_BORDER, rect, 2)


def wrap_text(text: str, font: pygame.font.Font, max_width: int) -> list[str]:
    """Greedy word wrap; explicit newlines are kept."""
    lines: list[str] = []
    for paragraph in text.split("\n"):
        line = ""
        for word in paragraph.split(" "):
            candidate = f"{line} {word}" if line else word
            if line and font.size(candidate)[0] > max_width:
                lines.append(line)
                line = word
            else:
                line = candidate
        lines.append(line)
    return lines


def bottom_box(surface: pygame.Surface, height: int, margin: int = 16) -> pygame.Rect:
    """A full-width box anchored to the bottom edge of *surface*."""
    sw, sh = surface.get_size()
    return pygame.Rect(margin, sh - height - margin, sw - margin * 2, height)
