import math
import pygame
from dataclasses import dataclass
from typing import Tuple, Optional, List
from nonogram_model import Puzzle
from nonogram_pattern import TriState
import grid_style

MAJOR_EVERY = 5
CLUE_GAP_PX = 6


@dataclass
class Camera:
    offset_x: float = 0.0
    offset_y: float = 0.0
    zoom: float = 1.0

    def screen_to_world(self, sx: float, sy: float) -> Tuple[float, float]:
        return (sx - self.offset_x) / self.zoom, (sy - self.offset_y) / self.zoom

    def world_to_screen(self, wx: float, wy: float) -> Tuple[float, float]:
        return wx * self.zoom + self.offset_x, wy * self.zoom + self.offset_y

    def zoom_at(self, mouse_pos: Tuple[int, int], zoom_factor: float, min_zoom: float, max_zoom: float) -> None:
        mx, my = mouse_pos
        wx, wy = self.screen_to_world(mx, my)

        new_zoom = self.zoom * zoom_factor
        new_zoom = max(min_zoom, min(max_zoom, new_zoom))
        if abs(new_zoom - self.zoom) < 1e-9:
            return

        self.zoom = new_zoom
        self.offset_x = mx - wx * self.zoom
        self.offset_y = my - wy * self.zoom


def clamp_int(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def clue_color(solved: bool, valid: bool) -> Tuple[int, int, int]:
    if solved:
        return grid_style.COLOR_TEXT_SOLVED
    if not valid:
        return grid_style.COLOR_TEXT_INVALID
    return grid_style.COLOR_TEXT_CLUE


def _draw_cell(screen: pygame.Surface, rect: pygame.Rect, state: TriState) -> None:
    if state == TriState.FULL:
        pygame.draw.rect(screen, grid_style.COLOR_FULL, rect)
    elif state == TriState.EMPTY:
        pygame.draw.rect(screen, grid_style.COLOR_EMPTY, rect)
        inset = max(2, rect.width // 4)
        a = (rect.left + inset, rect.top + inset)
        b = (rect.right - inset, rect.bottom - inset)
        c = (rect.left + inset, rect.bottom - inset)
        d = (rect.right - inset, rect.top + inset)
        pygame.draw.line(screen, grid_style.COLOR_EMPTY_MARK, a, b, 2)
        pygame.draw.line(screen, grid_style.COLOR_EMPTY_MARK, c, d, 2)
    else:
        pygame.draw.rect(screen, grid_style.COLOR_UNKNOWN, rect)


def draw_puzzle(
    screen: pygame.Surface,
    puzzle: Puzzle,
    camera: Camera,
    base_cell_size: int,
    font: pygame.font.Font,
    highlight: Optional[Tuple[int, int]] = None
) -> None:
    rows, cols = puzzle.num_rows, puzzle.num_cols

    cell_size = base_cell_size * camera.zoom
    if cell_size < 2:
        return

    sw, sh = screen.get_size()
    wl, wt = camera.screen_to_world(-cell_size, -cell_size)
    wr, wb = camera.screen_to_world(sw + cell_size, sh + cell_size)
    c0 = clamp_int(int(math.floor(wl / base_cell_size)), 0, cols - 1)
    r0 = clamp_int(int(math.floor(wt / base_cell_size)), 0, rows - 1)
    c1 = clamp_int(int(math.ceil(wr / base_cell_size)), 0, cols - 1)
    r1 = clamp_int(int(math.ceil(wb / base_cell_size)), 0, rows - 1)

    for r in range(r0, r1 + 1):
        for c in range(c0, c1 + 1):
            sx, sy = camera.world_to_screen(c * base_cell_size, r * base_cell_size)
            rect = pygame.Rect(int(sx), int(sy), int(cell_size), int(cell_size))
            _draw_cell(screen, rect, puzzle.get_state(r, c))
            pygame.draw.rect(screen, grid_style.COLOR_GRID_LINES, rect, 1)
            if highlight is not None and (r, c) == highlight:
                pygame.draw.rect(screen, grid_style.COLOR_HOVER_HIGHLIGHT, rect, 3)

    # heavier rule every fifth line so cells are easy to count
    x0, y0 = camera.world_to_screen(0, 0)
    x1, y1 = camera.world_to_screen(cols * base_cell_size, rows * base_cell_size)
    for c in range(0, cols + 1, MAJOR_EVERY):
        x, _ = camera.world_to_screen(c * base_cell_size, 0)
        pygame.draw.line(screen, grid_style.COLOR_GRID_MAJOR, (int(x), int(y0)), (int(x), int(y1)), 2)
    for r in range(0, rows + 1, MAJOR_EVERY):
        _, y = camera.world_to_screen(0, r * base_cell_size)
        pygame.draw.line(screen, grid_style.COLOR_GRID_MAJOR, (int(x0), int(y)), (int(x1), int(y)), 2)
    pygame.draw.rect(screen, grid_style.COLOR_GRID_MAJOR,
                     pygame.Rect(int(x0), int(y0), int(x1 - x0), int(y1 - y0)), 2)

    # row clues to the left, right aligned against the grid
    for r in range(rows):
        color = clue_color(puzzle.is_row_solved(r), puzzle.is_row_valid(r))
        surf = font.render(" ".join(str(n) for n in puzzle.row_clue(r)), True, color)
        _, sy = camera.world_to_screen(0, (r + 0.5) * base_cell_size)
        screen.blit(surf, (int(x0) - CLUE_GAP_PX - surf.get_width(), int(sy) - surf.get_height() // 2))

    # column clues stacked above, last number nearest the grid
    for c in range(cols):
        color = clue_color(puzzle.is_col_solved(c), puzzle.is_col_valid(c))
        sx, _ = camera.world_to_screen((c + 0.5) * base_cell_size, 0)
        y = int(y0) - CLUE_GAP_PX
        for n in reversed(puzzle.col_clue(c)):
            surf = font.render(str(n), True, color)
            y -= surf.get_height()
            screen.blit(surf, (int(sx) - surf.get_width() // 2, y))


def clue_margins(puzzle: Puzzle) -> Tuple[int, int]:
    """Longest row clue and tallest column clue, in numbers."""
    left = max(len(puzzle.row_clue(r)) for r in range(puzzle.num_rows))
    top = max(len(puzzle.col_clue(c)) for c in range(puzzle.num_cols))
    return left, top


def pick_cell_from_mouse(puzzle: Puzzle, camera: Camera, base_cell_size: int, mouse_pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
    mx, my = mouse_pos
    wx, wy = camera.screen_to_world(mx, my)
    c = int(wx // base_cell_size)
    r = int(wy // base_cell_size)
    if puzzle.in_bounds(r, c):
        return (r, c)
    return None


def cells_in_rect(puzzle: Puzzle, corner_a: Tuple[int, int], corner_b: Tuple[int, int]) -> List[Tuple[int, int]]:
    """All cells of the grid inside the box spanned by two cells (inclusive)."""
    r_lo, r_hi = sorted((corner_a[0], corner_b[0]))
    c_lo, c_hi = sorted((corner_a[1], corner_b[1]))
    r_lo, r_hi = clamp_int(r_lo, 0, puzzle.num_rows - 1), clamp_int(r_hi, 0, puzzle.num_rows - 1)
    c_lo, c_hi = clamp_int(c_lo, 0, puzzle.num_cols - 1), clamp_int(c_hi, 0, puzzle.num_cols - 1)
    return [(r, c) for r in range(r_lo, r_hi + 1) for c in range(c_lo, c_hi + 1)]
