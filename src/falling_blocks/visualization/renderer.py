from __future__ import annotations

from typing import Tuple

import pygame

from falling_blocks.game import PALETTE, FallingBlocksGame


GRID_LINE = (51, 51, 51)
PREVIEW_SIZE = 4


def _color_for_value(v: int) -> Tuple[int, int, int]:
    return PALETTE.get(abs(v), (200, 200, 200))


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self._font = None

    def window_size(self, game: FallingBlocksGame) -> Tuple[int, int]:
        width = self.margin * 3 + (game.width + PREVIEW_SIZE) * self.cell_size
        height = self.margin * 2 + game.height * self.cell_size
        return width, height

    def _cell(self, surf: pygame.Surface, x0: int, y0: int, x: int, y: int, color: Tuple[int, int, int]) -> None:
        rect = pygame.Rect(
            x0 + x * self.cell_size,
            y0 + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )
        pygame.draw.rect(surf, color, rect)

    def _draw_board(self, screen: pygame.Surface, game: FallingBlocksGame) -> None:
        state = game.composite_grid()
        h, w = state.shape
        for y in range(h):
            for x in range(w):
                self._cell(screen, self.margin, self.margin, x, y, _color_for_value(int(state[y, x])))

    def _draw_preview(self, screen: pygame.Surface, game: FallingBlocksGame) -> None:
        x0 = self.margin * 2 + game.width * self.cell_size
        y0 = self.margin * 2
        piece = game.next_piece
        # Offsets span x in [-1, 2], shift one column to keep them on the panel.
        cells = {(dx + 1, dy) for dx, dy in piece.relative_blocks}
        for y in range(PREVIEW_SIZE):
            for x in range(PREVIEW_SIZE):
                color = _color_for_value(int(piece.color)) if (x, y) in cells else GRID_LINE
                self._cell(screen, x0, y0, x, y, color)

    def _banner(self, screen: pygame.Surface, text: str) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 36)
        label = self._font.render(text, True, (255, 255, 255))
        rect = label.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
        backdrop = pygame.Surface(rect.inflate(16, 8).size, pygame.SRCALPHA)
        backdrop.fill((0, 0, 0, 90))
        screen.blit(backdrop, rect.inflate(16, 8))
        screen.blit(label, rect)

    def draw(self, screen: pygame.Surface, game: FallingBlocksGame) -> None:
        screen.fill((10, 10, 14))
        self._draw_board(screen, game)
        self._draw_preview(screen, game)
        if game.game_over:
            self._banner(screen, "GAME OVER")
        elif game.paused:
            self._banner(screen, "PAUSED")
        pygame.display.flip()
