import os
import sys

import pygame
import pytest

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import grid_style
from nonogram_drawing import (
    Camera,
    cells_in_rect,
    clamp_int,
    clue_color,
    clue_margins,
    draw_puzzle,
    pick_cell_from_mouse,
)
from nonogram_pattern import TriState
from tests.sample_puzzles import tiny_puzzle


def test_camera_round_trip():
    cam = Camera(offset_x=40, offset_y=-10, zoom=2.0)
    assert cam.world_to_screen(5, 5) == (50, 0)
    assert cam.screen_to_world(50, 0) == (5, 5)


def test_zoom_keeps_point_under_mouse():
    cam = Camera(offset_x=100, offset_y=50)
    before = cam.screen_to_world(300, 200)
    cam.zoom_at((300, 200), 1.5, 0.2, 6.0)
    assert cam.zoom == pytest.approx(1.5)
    after = cam.screen_to_world(300, 200)
    assert after == pytest.approx(before)


def test_zoom_is_clamped():
    cam = Camera()
    for _ in range(50):
        cam.zoom_at((0, 0), 2.0, 0.2, 6.0)
    assert cam.zoom == 6.0


def test_clamp_int():
    assert clamp_int(-3, 0, 4) == 0
    assert clamp_int(9, 0, 4) == 4
    assert clamp_int(2, 0, 4) == 2


@pytest.mark.parametrize("pos,expected", [
    ((100, 100), (0, 0)),
    ((139, 121), (1, 1)),
    ((199, 199), (4, 4)),
    ((200, 150), None),
    ((99, 150), None),
])
def test_pick_cell_from_mouse(pos, expected):
    cam = Camera(offset_x=100, offset_y=100)
    assert pick_cell_from_mouse(tiny_puzzle(), cam, 20, pos) == expected


def test_cells_in_rect():
    puzzle = tiny_puzzle()
    assert cells_in_rect(puzzle, (1, 3), (0, 2)) == [(0, 2), (0, 3), (1, 2), (1, 3)]
    assert len(cells_in_rect(puzzle, (0, 0), (9, 9))) == 25


def test_clue_color():
    assert clue_color(True, True) == grid_style.COLOR_TEXT_SOLVED
    assert clue_color(False, False) == grid_style.COLOR_TEXT_INVALID
    assert clue_color(False, True) == grid_style.COLOR_TEXT_CLUE


def test_clue_margins():
    assert clue_margins(tiny_puzzle()) == (2, 2)


def test_draw_puzzle_paints_cells():
    pygame.font.init()
    font = pygame.font.Font(None, 18)
    screen = pygame.Surface((300, 300))
    puzzle = tiny_puzzle()
    puzzle.set_state(0, 0, TriState.FULL)
    cam = Camera(offset_x=100, offset_y=100)
    draw_puzzle(screen, puzzle, cam, 20, font, highlight=(4, 4))
    assert tuple(screen.get_at((110, 110)))[:3] == grid_style.COLOR_FULL
    assert tuple(screen.get_at((130, 130)))[:3] == grid_style.COLOR_UNKNOWN
    assert tuple(screen.get_at((181, 190)))[:3] == grid_style.COLOR_HOVER_HIGHLIGHT
