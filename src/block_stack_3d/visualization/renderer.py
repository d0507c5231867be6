from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from block_stack_3d.game import GameSnapshot, GameState
from block_stack_3d.game.grid import EMPTY
from block_stack_3d.game.pieces import color_to_rgb


BACKGROUND = (10, 10, 14)
PANEL = (30, 30, 36)
TEXT = (230, 230, 230)
GHOST = (200, 200, 200)
HINT = (150, 150, 160)

CONTROLS = (
    "Arrows/WASD: move",
    "Space: down  Tab: drop",
    "Q/E: rotate Y",
    "R/T: rotate X",
    "F/G: rotate Z",
    "Enter: start/pause",
    "Esc: quit",
)


def _shade(rgb: Tuple[int, int, int], factor: float) -> Tuple[int, int, int]:
    return tuple(int(max(0, min(255, c * factor))) for c in rgb)  # type: ignore[return-value]


class Renderer:
    """Draws two orthographic views of a :class:`GameSnapshot`.

    Left: top-down (X across, Z down), each column showing its topmost
    block, darker when lower. Right: front view (X across, Y up), each cell
    showing the nearest block along Z.
    """

    def __init__(self, cell_size: int = 24, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, dimensions: Tuple[int, int, int]) -> Tuple[int, int]:
        w, h, d = dimensions
        width = self.margin * 4 + w * self.cell_size * 2 + 9 * self.cell_size
        height = self.margin * 2 + max(h, d) * self.cell_size + 60
        return width, height

    def _rect(self, origin: Tuple[int, int], col: int, row: int) -> pygame.Rect:
        return pygame.Rect(
            origin[0] + col * self.cell_size,
            origin[1] + row * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _top_view(self, surface: pygame.Surface, snap: GameSnapshot, origin: Tuple[int, int]) -> None:
        w, h, d = snap.dimensions
        cells = snap.cells
        for x in range(w):
            for z in range(d):
                filled = np.nonzero(cells[x, :, z] != EMPTY)[0]
                color = PANEL
                if filled.size:
                    top = int(filled[-1])
                    color = _shade(color_to_rgb(int(cells[x, top, z])), 0.35 + 0.65 * (top + 1) / h)
                pygame.draw.rect(surface, color, self._rect(origin, x, z))
        if snap.ghost_blocks is not None:
            for x, _, z in snap.ghost_blocks.tolist():
                pygame.draw.rect(surface, GHOST, self._rect(origin, x, z), 2)
        if snap.current_blocks is not None:
            for x, _, z in snap.current_blocks.tolist():
                pygame.draw.rect(surface, color_to_rgb(snap.current_color), self._rect(origin, x, z))

    def _front_view(self, surface: pygame.Surface, snap: GameSnapshot, origin: Tuple[int, int]) -> None:
        w, h, d = snap.dimensions
        cells = snap.cells
        for x in range(w):
            for y in range(h):
                filled = np.nonzero(cells[x, y, :] != EMPTY)[0]
                color = PANEL
                if filled.size:
                    near = int(filled[0])
                    color = _shade(color_to_rgb(int(cells[x, y, near])), 1.0 - 0.6 * near / d)
                pygame.draw.rect(surface, color, self._rect(origin, x, h - 1 - y))
        if snap.ghost_blocks is not None:
            for x, y, _ in snap.ghost_blocks.tolist():
                pygame.draw.rect(surface, GHOST, self._rect(origin, x, h - 1 - y), 2)
        if snap.current_blocks is not None:
            for x, y, _ in snap.current_blocks.tolist():
                pygame.draw.rect(surface, color_to_rgb(snap.current_color), self._rect(origin, x, h - 1 - y))

    def _preview(self, surface: pygame.Surface, snap: GameSnapshot, origin: Tuple[int, int]) -> None:
        # base shape seen from the front, pivot in the middle of a 4x4 box
        for bx, by, _ in snap.next_shape.tolist():
            pygame.draw.rect(surface, color_to_rgb(snap.next_color), self._rect(origin, bx + 1, 2 - by))

    def draw(self, screen: pygame.Surface, snap: GameSnapshot) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        w, h, d = snap.dimensions
        screen.fill(BACKGROUND)
        top_origin = (self.margin, self.margin)
        front_origin = (self.margin * 2 + w * self.cell_size, self.margin)
        side_x = self.margin * 3 + w * self.cell_size * 2
        self._top_view(screen, snap, top_origin)
        self._front_view(screen, snap, front_origin)
        self._preview(screen, snap, (side_x, self.margin + 30))

        lines = [
            "Next:",
            "",
            "",
            "",
            "",
            f"Score: {snap.score}",
            f"Level: {snap.level}",
            f"Layers: {snap.lines_cleared}",
        ]
        if snap.state is GameState.START_SCREEN:
            lines.append("Enter: start")
        elif snap.state is GameState.PAUSED:
            lines.append("Paused - Enter to resume")
        elif snap.state is GameState.GAME_OVER:
            lines.append("Game Over - Enter to restart")
        for i, txt in enumerate(lines):
            if txt:
                img = self._font.render(txt, True, TEXT)
                screen.blit(img, (side_x, self.margin + i * 24))
        controls_y = self.margin + (len(lines) + 1) * 24
        for i, txt in enumerate(CONTROLS):
            screen.blit(self._font.render(txt, True, HINT), (side_x, controls_y + i * 20))
        pygame.display.flip()
