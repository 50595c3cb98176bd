from __future__ import annotations

from typing import List, Tuple

import pygame

from tetris_engine.game import COLUMNS, KIND_COLORS, ROTATIONS, ROWS, CellKind, CellState, TetrisGame, TetrominoKind


BACKGROUND = (10, 10, 14)
BOARD_SURFACE = (30, 30, 36)
EMPTY_CELL = (31, 33, 48)
TEXT = (230, 230, 230)


def _color_for_cell(state: CellState) -> Tuple[int, int, int]:
    if state.kind is None:
        return EMPTY_CELL
    base = KIND_COLORS[state.kind]
    if state.state is CellKind.GHOST:
        r, g, b = base
        return int(r * 0.35), int(g * 0.35), int(b * 0.35)
    return base


def preview_cells(kind: TetrominoKind) -> List[Tuple[int, int]]:
    """Spawn-state cells of `kind` shifted to the top-left of a 4x4 box."""
    base = ROTATIONS[kind][0]
    min_x = min(p.x for p in base)
    min_y = min(p.y for p in base)
    return [(p.x - min_x, p.y - min_y) for p in base]


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = 6 * cell_size

    @property
    def window_size(self) -> Tuple[int, int]:
        width = self.margin * 3 + COLUMNS * self.cell_size + self.panel_width
        height = self.margin * 2 + ROWS * self.cell_size
        return width, height

    def _grid_surface(self, game: TetrisGame) -> pygame.Surface:
        surf = pygame.Surface((COLUMNS * self.cell_size, ROWS * self.cell_size))
        surf.fill(BOARD_SURFACE)
        for y, row in enumerate(game.snapshot()):
            for x, state in enumerate(row):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                width = 2 if state.state is CellKind.GHOST else 0
                pygame.draw.rect(surf, _color_for_cell(state), rect, width)
        return surf

    def _draw_panel(self, screen: pygame.Surface, game: TetrisGame, font: pygame.font.Font) -> None:
        x0 = self.margin * 2 + COLUMNS * self.cell_size
        y0 = self.margin
        screen.blit(font.render("Next", True, TEXT), (x0, y0))
        preview = self.cell_size * 3 // 4
        for px, py in preview_cells(game.next_kind):
            rect = pygame.Rect(x0 + px * preview, y0 + 28 + py * preview, preview - 1, preview - 1)
            pygame.draw.rect(screen, KIND_COLORS[game.next_kind], rect)
        info_lines = [
            f"Score: {game.score}",
            f"Level: {game.level}",
            f"Lines: {game.lines_cleared}",
            f"Gravity: {game.fall_interval_text}",
            "",
            "Move: Left/Right",
            "Rotate: Up/Space",
            "Soft drop: Down",
            "Hard drop: Enter",
            "Restart: R",
        ]
        y_text = y0 + 28 + preview * 3
        for i, txt in enumerate(info_lines):
            screen.blit(font.render(txt, True, TEXT), (x0, y_text + i * 22))

    def draw(self, screen: pygame.Surface, game: TetrisGame, font: pygame.font.Font) -> None:
        screen.fill(BACKGROUND)
        screen.blit(self._grid_surface(game), (self.margin, self.margin))
        self._draw_panel(screen, game, font)
        if game.is_game_over:
            over = font.render("Game Over - Press R to restart, ESC to quit", True, (255, 100, 100))
            rect = over.get_rect(center=(self.margin + COLUMNS * self.cell_size // 2, self.margin // 2 + 2))
            screen.blit(over, rect)
        pygame.display.flip()
