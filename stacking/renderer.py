from __future__ import annotations

import pygame
from typing import Optional

from stacking.items import TowerSnapshot
from stacking.layout import CanvasSpec, Rect, cup_outline, item_rects, structure_rects


COLORS = {
    "red": (200, 40, 40),
    "blue": (40, 70, 200),
    "green": (40, 160, 60),
    "yellow": (220, 200, 40),
    "magenta": (200, 40, 200),
    "black": (20, 20, 20),
}


class TowerRenderer:
    """Pygame view of a tower. Reads snapshots, never mutates the tower."""

    def __init__(self, canvas: Optional[CanvasSpec] = None, step_delay_ms: int = 0):
        self.canvas = canvas or CanvasSpec()
        self.step_delay_ms = int(step_delay_ms)
        self.hud_h = 24
        self.screen = None
        self._open()

    def _open(self):
        pygame.init()
        self.screen = pygame.display.set_mode((self.canvas.width, self.canvas.height + self.hud_h))
        pygame.display.set_caption("Stacking Tower")
        self.font = pygame.font.SysFont(None, 18)
        self.clock = pygame.time.Clock()

    def render(self, snapshot: TowerSnapshot, message: Optional[str] = None):
        if self.screen is None:
            self._open()
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                raise SystemExit

        self.screen.fill((255, 255, 255))
        for r in structure_rects(snapshot.width, snapshot.max_height, self.canvas):
            self._fill(r)
        for r in item_rects(snapshot, self.canvas):
            if r.kind == "cup":
                for part in cup_outline(r, self.canvas):
                    self._fill(part)
            else:
                self._fill(r)
        self._draw_hud(snapshot, message)
        pygame.display.flip()

        self.clock.tick(60)
        if self.step_delay_ms > 0:
            pygame.time.wait(self.step_delay_ms)

    def _fill(self, r: Rect):
        rgb = COLORS.get(r.color, COLORS["black"])
        pygame.draw.rect(self.screen, rgb, (r.x, r.y, r.w, r.h))

    def _draw_hud(self, snapshot: TowerSnapshot, message: Optional[str]):
        line = f"height={snapshot.height}/{snapshot.max_height}  items={len(snapshot.items)}"
        if message:
            line += f"  {message}"
        surf = self.font.render(line, True, (30, 30, 30))
        self.screen.blit(surf, (6, self.canvas.height + 4))

    def close(self):
        pygame.quit()
        self.screen = None
